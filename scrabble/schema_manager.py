"""
schema_manager.py - Create (or recreate) the ScrabbleGames table.

Column families are grouped by logical entity rather than by query, so new
queries do not force a schema change:
1. Game: game-level information (ids, tie flag, round, division, date, lexicon)
2. Winner: the winning player's id, name, score, ratings and position
3. Loser: the same attributes for the losing player
"""

import logging

from storage.base import ColumnFamily, StoreClient, TableNotFoundError, TableSchema

from .constants import COLUMN_FAMILIES, MAX_VERSIONS, TABLE_NAME

logger = logging.getLogger(__name__)


def games_table_schema(table_name: str = TABLE_NAME, max_versions: int = MAX_VERSIONS) -> TableSchema:
    """Schema of the games table: Game, Winner and Loser families."""
    return TableSchema(
        name=table_name,
        families=tuple(ColumnFamily(name, max_versions) for name in COLUMN_FAMILIES),
    )


def drop_table_if_exists(client: StoreClient, table_name: str = TABLE_NAME) -> bool:
    """
    Disable and delete a table. A missing table is not an error.

    Returns:
        True if a table was dropped
    """
    try:
        if client.is_table_enabled(table_name):
            client.disable_table(table_name)
        client.delete_table(table_name)
    except TableNotFoundError:
        logger.info(f"No previous '{table_name}' table to delete")
        return False

    logger.info(f"Deleted previous '{table_name}' table version")
    return True


def create_or_replace_table(
    client: StoreClient,
    table_name: str = TABLE_NAME,
    max_versions: int = MAX_VERSIONS,
) -> TableSchema:
    """
    Drop any existing games table and create it afresh.

    Store errors other than a missing table during the drop propagate.

    Returns:
        The TableSchema that was created
    """
    drop_table_if_exists(client, table_name)

    schema = games_table_schema(table_name, max_versions)
    client.create_table(schema)
    return schema
