"""
key_codec.py - Row key encoding for the ScrabbleGames table.

A row key is the tournament id and the game id, each left-padded with zeros
to 10 ASCII digits and concatenated (20 bytes). Fixed width keeps the byte
order of keys identical to the numeric order of (tourney_id, game_id), so a
tournament, or a run of tournaments, is one contiguous key range.

Example: tournament 42153, game 123 -> b'00000421530000000123'
"""

import re
from typing import Tuple, Union

from .constants import ID_WIDTH, KEY_WIDTH, MAX_ID, GAME_ID_FLOOR, GAME_ID_CEILING
from .exceptions import InvalidIdentifier

Identifier = Union[int, str]

_DIGITS = re.compile(r'[0-9]+')


def parse_identifier(value: Identifier) -> int:
    """
    Validate a tournament or game id and return it as an int.

    Accepts ints and ASCII-decimal strings. Whitespace is not stripped, so a
    padded field such as " 3" is rejected.

    Raises:
        InvalidIdentifier: If the value is negative, non-numeric or wider
            than 10 digits.
    """
    if isinstance(value, bool):
        raise InvalidIdentifier(value)

    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        if not _DIGITS.fullmatch(value):
            raise InvalidIdentifier(value)
        number = int(value)
    else:
        raise InvalidIdentifier(value, f"unsupported type {type(value).__name__}")

    if number < 0 or number > MAX_ID:
        raise InvalidIdentifier(value)
    return number


def pad(value: Identifier) -> str:
    """Zero-pad an id to the fixed key segment width."""
    return str(parse_identifier(value)).zfill(ID_WIDTH)


def encode_key(tourney_id: Identifier, game_id: Identifier) -> bytes:
    """Build the 20-byte row key for a game."""
    return (pad(tourney_id) + pad(game_id)).encode('ascii')


def decode_key(key: Union[bytes, str]) -> Tuple[int, int]:
    """
    Split a row key back into (tourney_id, game_id).

    Raises:
        InvalidIdentifier: If the key is not exactly 20 ASCII digits.
    """
    if isinstance(key, (bytes, bytearray)):
        try:
            text = bytes(key).decode('ascii')
        except UnicodeDecodeError:
            raise InvalidIdentifier(key, "row key is not ASCII") from None
    else:
        text = key

    if len(text) != KEY_WIDTH or not _DIGITS.fullmatch(text):
        raise InvalidIdentifier(key, f"row key must be {KEY_WIDTH} decimal digits")

    return int(text[:ID_WIDTH]), int(text[ID_WIDTH:])


def tourney_range(tourney_id: Identifier) -> Tuple[bytes, bytes]:
    """
    Scan bounds covering every game of one tournament.

    The stop key is exclusive, so game id 9999999999 itself falls outside;
    real game ids never get that high.
    """
    prefix = pad(tourney_id)
    return (
        (prefix + GAME_ID_FLOOR).encode('ascii'),
        (prefix + GAME_ID_CEILING).encode('ascii'),
    )


def range_of_tourneys(first_tourney_id: Identifier, last_tourney_id: Identifier) -> Tuple[bytes, bytes]:
    """
    Scan bounds for the tournaments in [first, last).

    The last tournament is excluded: its first possible key is the stop key.
    """
    return (
        (pad(first_tourney_id) + GAME_ID_FLOOR).encode('ascii'),
        (pad(last_tourney_id) + GAME_ID_FLOOR).encode('ascii'),
    )
