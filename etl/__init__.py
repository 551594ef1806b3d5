"""
etl - Bulk ingestion of Scrabble game records.
"""

from .load_games import LoadSummary, iter_game_records, load_from_folder, resolve_input_file

__all__ = [
    'LoadSummary',
    'iter_game_records',
    'load_from_folder',
    'resolve_input_file',
]
