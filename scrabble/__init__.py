"""
scrabble/__init__.py - Package initialization for the Scrabble games store

Exports commonly used classes and functions for easy importing:
    from scrabble import GameQueries, create_or_replace_table, encode_key
"""

from .constants import (
    COLUMN_FAMILIES,
    GAME_FAMILY,
    LOSER_FAMILY,
    MAX_VERSIONS,
    TABLE_NAME,
    WINNER_FAMILY,
)

from .exceptions import (
    InvalidIdentifier,
    MalformedRecordError,
    MissingInputError,
    ScrabbleError,
)

from storage.base import (
    StoreError,
    TableExistsError,
    TableNotFoundError,
)

from .key_codec import (
    decode_key,
    encode_key,
    parse_identifier,
    range_of_tourneys,
    tourney_range,
)

from .schemas import (
    GameRecord,
    PlayerSide,
)

from .schema_manager import (
    create_or_replace_table,
    drop_table_if_exists,
    games_table_schema,
)

from .queries import (
    GameQueries,
    repeat_players_in_every_tourney,
)

from .config_loader import (
    ConfigLoader,
    get_config,
)


__all__ = [
    # Constants
    'COLUMN_FAMILIES',
    'GAME_FAMILY',
    'LOSER_FAMILY',
    'MAX_VERSIONS',
    'TABLE_NAME',
    'WINNER_FAMILY',
    # Errors
    'InvalidIdentifier',
    'MalformedRecordError',
    'MissingInputError',
    'ScrabbleError',
    'StoreError',
    'TableExistsError',
    'TableNotFoundError',
    # Key Codec
    'decode_key',
    'encode_key',
    'parse_identifier',
    'range_of_tourneys',
    'tourney_range',
    # Schemas
    'GameRecord',
    'PlayerSide',
    # Schema Manager
    'create_or_replace_table',
    'drop_table_if_exists',
    'games_table_schema',
    # Queries
    'GameQueries',
    'repeat_players_in_every_tourney',
    # Config
    'ConfigLoader',
    'get_config',
]
