"""
schemas.py - Pydantic schemas for Scrabble game records.

A GameRecord is one line of scrabble_games.csv projected onto the three
column families of the ScrabbleGames table. Every value stays text: ratings,
scores and positions are stored exactly as they appear in the input.
"""

from typing import List, Optional, Sequence

from pydantic import BaseModel

from storage.base import Mutation, Row

from .constants import (
    FIELD_COUNT,
    GAME_FAMILY,
    GAME_FIELD_INDEX,
    GAME_QUALIFIERS,
    LOSER_FAMILY,
    LOSER_FIELD_INDEX,
    PLAYER_QUALIFIERS,
    WINNER_FAMILY,
    WINNER_FIELD_INDEX,
)
from .exceptions import MalformedRecordError
from .key_codec import encode_key


# =============================================================================
# PLAYER SIDE
# =============================================================================

class PlayerSide(BaseModel):
    """Winner or loser half of a game."""
    id: str
    name: str
    score: str
    oldrating: str
    newrating: str
    pos: str

    @classmethod
    def from_fields(cls, fields: Sequence[str], index: dict) -> "PlayerSide":
        return cls(**{q: fields[i] for q, i in index.items()})

    @classmethod
    def from_row(cls, row: Row, family: str) -> "PlayerSide":
        return cls(**{q: row.text(family, q) or '' for q in PLAYER_QUALIFIERS})


# =============================================================================
# GAME RECORD
# =============================================================================

class GameRecord(BaseModel):
    """One game as stored in a ScrabbleGames row."""
    gameid: str
    tourneyid: str
    tie: str
    round: str
    division: str
    date: str
    lexicon: str
    winner: PlayerSide
    loser: PlayerSide

    @classmethod
    def from_fields(cls, fields: Sequence[str], line_number: Optional[int] = None) -> "GameRecord":
        """
        Project a split CSV line onto the record.

        Extra trailing fields are ignored.

        Raises:
            MalformedRecordError: If fewer than 19 fields are present
        """
        if len(fields) < FIELD_COUNT:
            raise MalformedRecordError(len(fields), FIELD_COUNT, line_number)

        return cls(
            **{q: fields[i] for q, i in GAME_FIELD_INDEX.items()},
            winner=PlayerSide.from_fields(fields, WINNER_FIELD_INDEX),
            loser=PlayerSide.from_fields(fields, LOSER_FIELD_INDEX),
        )

    @classmethod
    def from_row(cls, row: Row) -> "GameRecord":
        """Rebuild a record from a scanned row (missing cells become '')."""
        return cls(
            **{q: row.text(GAME_FAMILY, q) or '' for q in GAME_QUALIFIERS},
            winner=PlayerSide.from_row(row, WINNER_FAMILY),
            loser=PlayerSide.from_row(row, LOSER_FAMILY),
        )

    def row_key(self) -> bytes:
        """Row key from (tourneyid, gameid); raises InvalidIdentifier."""
        return encode_key(self.tourneyid, self.gameid)

    def to_mutation(self) -> Mutation:
        """The 19-cell put for this game."""
        mutation = Mutation(self.row_key())
        for qualifier in GAME_QUALIFIERS:
            mutation.add(GAME_FAMILY, qualifier, getattr(self, qualifier))
        for family, side in ((WINNER_FAMILY, self.winner), (LOSER_FAMILY, self.loser)):
            for qualifier in PLAYER_QUALIFIERS:
                mutation.add(family, qualifier, getattr(side, qualifier))
        return mutation

    def to_fields(self) -> List[str]:
        """Inverse of from_fields: the 19 CSV fields in file order."""
        fields = [''] * FIELD_COUNT
        for q, i in GAME_FIELD_INDEX.items():
            fields[i] = getattr(self, q)
        for side, index in ((self.winner, WINNER_FIELD_INDEX), (self.loser, LOSER_FIELD_INDEX)):
            for q, i in index.items():
                fields[i] = getattr(side, q)
        return fields
