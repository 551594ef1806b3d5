"""
storage - Wide-column store clients.

    from storage import connect
    with connect("localhost:9090") as client:          # HBase Thrift gateway
        ...
    with connect("sqlite:///scrabble_store.db") as client:  # local SQL store
        ...
"""

from .base import (
    CellFilter,
    ColumnFamily,
    Mutation,
    Row,
    StoreClient,
    StoreError,
    TableExistsError,
    TableNotFoundError,
    TableSchema,
)


def connect(address: str, **options) -> StoreClient:
    """
    Open a store client for `address`.

    Args:
        address: 'host:port' of an HBase Thrift server, or a SQLAlchemy
            SQLite URL for the local store
        **options: Passed to the client constructor (e.g. timeout, transport)

    Returns:
        HBaseStore or SqlStore instance

    Raises:
        ValueError: If the address matches neither form
    """
    if '://' in address:
        from .sql_store import SqlStore
        sql_options = {k: v for k, v in options.items() if k == 'scan_batch_size'}
        return SqlStore(address, **sql_options)

    host, sep, port = address.rpartition(':')
    if not sep or not host or not port.isdigit():
        raise ValueError(f"Expected HOST:PORT or a database URL, got '{address}'")

    from .hbase_store import HBaseStore
    return HBaseStore(host=host, port=int(port), **options)


__all__ = [
    'CellFilter',
    'ColumnFamily',
    'Mutation',
    'Row',
    'StoreClient',
    'StoreError',
    'TableExistsError',
    'TableNotFoundError',
    'TableSchema',
    'connect',
]
