"""
constants.py - Schema and ingestion constants for the Scrabble games store.

Includes:
- Table and column family names
- Qualifiers per family
- CSV field positions (scrabble_games.csv)
- Row key layout
- Loader defaults
"""

# ============================================================================
# 1. TABLE & COLUMN FAMILIES
# ============================================================================

TABLE_NAME = 'ScrabbleGames'

GAME_FAMILY = 'Game'
WINNER_FAMILY = 'Winner'
LOSER_FAMILY = 'Loser'

COLUMN_FAMILIES = [GAME_FAMILY, WINNER_FAMILY, LOSER_FAMILY]

# HBase keeps 3 versions by default
MAX_VERSIONS = 10

# ============================================================================
# 2. QUALIFIERS
# ============================================================================

GAME_QUALIFIERS = [
    'gameid', 'tourneyid', 'tie',
    'round', 'division', 'date', 'lexicon'
]

PLAYER_QUALIFIERS = [
    'id', 'name', 'score',
    'oldrating', 'newrating', 'pos'
]

TIE_TRUE = 'True'

# ============================================================================
# 3. CSV FIELD POSITIONS
# ============================================================================

# Index of each qualifier within a split line of scrabble_games.csv
GAME_FIELD_INDEX = {
    'gameid': 0,
    'tourneyid': 1,
    'tie': 2,
    'round': 15,
    'division': 16,
    'date': 17,
    'lexicon': 18,
}

WINNER_FIELD_INDEX = {
    'id': 3,
    'name': 4,
    'score': 5,
    'oldrating': 6,
    'newrating': 7,
    'pos': 8,
}

LOSER_FIELD_INDEX = {
    'id': 9,
    'name': 10,
    'score': 11,
    'oldrating': 12,
    'newrating': 13,
    'pos': 14,
}

FIELD_COUNT = 19

CSV_HEADER = [
    'gameid', 'tourneyid', 'tie',
    'winnerid', 'winnername', 'winnerscore',
    'winneroldrating', 'winnernewrating', 'winnerpos',
    'loserid', 'losername', 'loserscore',
    'loseroldrating', 'losernewrating', 'loserpos',
    'round', 'division', 'date', 'lexicon',
]

# ============================================================================
# 4. ROW KEY LAYOUT
# ============================================================================

ID_WIDTH = 10
KEY_WIDTH = 2 * ID_WIDTH
MAX_ID = 10 ** ID_WIDTH - 1

GAME_ID_FLOOR = '0' * ID_WIDTH
GAME_ID_CEILING = '9' * ID_WIDTH

# ============================================================================
# 5. LOADER DEFAULTS
# ============================================================================

INPUT_FILE_NAME = 'scrabble_games.csv'
INPUT_ENCODING = 'utf-8'
CSV_DELIMITER = ','

# Larger batches exhausted client memory in test runs
BATCH_SIZE = 100_000
