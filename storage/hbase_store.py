"""
hbase_store.py - StoreClient for HBase through its Thrift gateway (happybase).

Provides:
- Table admin (create / disable / delete) with HBase error semantics
- Batched puts (one Thrift batch per put call)
- Lazy range scans with SingleColumnValueFilter pushed down to the region
  servers as an HBase filter-language string

Thrift and socket failures are wrapped in StoreError so callers never see
transport-specific exceptions.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

import happybase
from thriftpy2.thrift import TException

from .base import (
    CellFilter, Mutation, Row, StoreClient, StoreError, TableExistsError,
    TableNotFoundError, TableSchema, to_bytes,
)

logger = logging.getLogger(__name__)

DEFAULT_THRIFT_PORT = 9090


def column_name(family: str, qualifier: str) -> bytes:
    """HBase column address: b'Family:qualifier'."""
    return f"{family}:{qualifier}".encode('utf-8')


def split_column(column: bytes):
    family, _, qualifier = column.decode('utf-8').partition(':')
    return family, qualifier


def _describe(error: Exception) -> str:
    if isinstance(error, OSError):
        return str(error)
    # thriftpy2 exceptions keep their text in .message or args, not in str()
    return getattr(error, 'message', None) or (str(error.args[0]) if error.args else repr(error))


def _quote(value: str) -> str:
    # Filter language escapes a single quote by doubling it
    return "'" + value.replace("'", "''") + "'"


def render_filter(cell_filter: CellFilter) -> str:
    """
    Render a CellFilter in the HBase filter language.

    Example:
        SingleColumnValueFilter('Winner', 'name', =, 'binary:Alice', false, true)
    """
    value = to_bytes(cell_filter.value).decode('utf-8')
    return "SingleColumnValueFilter({family}, {qualifier}, =, {comparator}, {if_missing}, true)".format(
        family=_quote(cell_filter.family),
        qualifier=_quote(cell_filter.qualifier),
        comparator=_quote('binary:' + value),
        if_missing='true' if cell_filter.filter_if_missing else 'false',
    )


class HBaseStore(StoreClient):
    """StoreClient over a happybase connection."""

    def __init__(
        self,
        host: str = 'localhost',
        port: int = DEFAULT_THRIFT_PORT,
        timeout: Optional[int] = None,
        transport: str = 'buffered',
        protocol: str = 'binary',
        table_prefix: Optional[str] = None,
        scan_batch_size: int = 1000,
        connection=None,
    ):
        self.host = host
        self.port = port
        self.scan_batch_size = scan_batch_size

        if connection is not None:
            self.connection = connection
        else:
            try:
                self.connection = happybase.Connection(
                    host=host,
                    port=port,
                    timeout=timeout,
                    transport=transport,
                    protocol=protocol,
                    table_prefix=table_prefix,
                )
            except (TException, OSError) as e:
                raise StoreError(f"Could not connect to HBase Thrift server at {host}:{port}: {_describe(e)}") from e

    @contextmanager
    def _wrap_errors(self, action: str):
        try:
            yield
        except StoreError:
            raise
        except (TException, OSError) as e:
            raise StoreError(f"HBase {action} failed: {_describe(e)}") from e

    def _table_names(self) -> List[str]:
        with self._wrap_errors("list tables"):
            return [
                t.decode('utf-8') if isinstance(t, bytes) else t
                for t in self.connection.tables()
            ]

    # -------------------------------------------------------------------------
    # Admin
    # -------------------------------------------------------------------------

    def table_exists(self, name: str) -> bool:
        return name in self._table_names()

    def create_table(self, schema: TableSchema) -> None:
        if self.table_exists(schema.name):
            raise TableExistsError(schema.name)

        families: Dict[str, dict] = {
            f.name: {'max_versions': f.max_versions} for f in schema.families
        }
        with self._wrap_errors(f"create table '{schema.name}'"):
            self.connection.create_table(schema.name, families)
        logger.info(f"Created table '{schema.name}' with families {schema.family_names()}")

    def disable_table(self, name: str) -> None:
        if not self.table_exists(name):
            raise TableNotFoundError(name)
        with self._wrap_errors(f"disable table '{name}'"):
            self.connection.disable_table(name)

    def delete_table(self, name: str) -> None:
        if not self.table_exists(name):
            raise TableNotFoundError(name)
        with self._wrap_errors(f"delete table '{name}'"):
            self.connection.delete_table(name)

    def is_table_enabled(self, name: str) -> bool:
        if not self.table_exists(name):
            raise TableNotFoundError(name)
        with self._wrap_errors(f"check table '{name}'"):
            return bool(self.connection.is_table_enabled(name))

    # -------------------------------------------------------------------------
    # Data
    # -------------------------------------------------------------------------

    def put(self, table: str, mutations: List[Mutation]) -> None:
        if not mutations:
            return

        with self._wrap_errors(f"put into '{table}'"):
            batch = self.connection.table(table).batch()
            for mutation in mutations:
                batch.put(
                    mutation.row_key,
                    {column_name(f, q): v for f, q, v in mutation.cells},
                )
            batch.send()

    def scan(
        self,
        table: str,
        start: Optional[bytes] = None,
        stop: Optional[bytes] = None,
        cell_filter: Optional[CellFilter] = None,
    ) -> Iterator[Row]:
        kwargs = {'batch_size': self.scan_batch_size}
        if start is not None:
            kwargs['row_start'] = to_bytes(start)
        if stop is not None:
            kwargs['row_stop'] = to_bytes(stop)
        if cell_filter is not None:
            kwargs['filter'] = render_filter(cell_filter)

        with self._wrap_errors(f"scan of '{table}'"):
            for key, data in self.connection.table(table).scan(**kwargs):
                cells = {split_column(column): value for column, value in data.items()}
                if cells:
                    yield Row(key=key, cells=cells)

    def cell_versions(
        self, table: str, row_key: bytes, family: str, qualifier: str, limit: int = 1
    ) -> List[bytes]:
        with self._wrap_errors(f"read of '{table}'"):
            return list(
                self.connection.table(table).cells(
                    to_bytes(row_key), column_name(family, qualifier), versions=limit
                )
            )

    def close(self) -> None:
        self.connection.close()

    def __repr__(self):
        return f"<HBaseStore(host='{self.host}', port={self.port})>"
