"""
queries.py - Range-scan queries over the ScrabbleGames table.

Each query opens exactly one scan and consumes it as a lazy stream of rows:
- Q1: opponents (loser ids) of a named winner within one tournament
- Q2: players appearing in at least two games of every tournament in a
  range of tournaments
- Q3: ids of the tied games of one tournament
- count_records: diagnostic full-table row count

Row keys start with the zero-padded tournament id, so a tournament is a
contiguous key range and a scan returns its games ordered by game id.
"""

import logging
from typing import Iterable, List, Optional, Set

from storage.base import CellFilter, Row, StoreClient

from .constants import (
    GAME_FAMILY, LOSER_FAMILY, TABLE_NAME, TIE_TRUE, WINNER_FAMILY,
)
from .key_codec import Identifier, parse_identifier, range_of_tourneys, tourney_range

logger = logging.getLogger(__name__)


def _text(value: Optional[bytes]) -> Optional[str]:
    return value.decode('utf-8') if value is not None else None


# ============================================================================
# Q2 STREAMING INTERSECTION
# ============================================================================

def repeat_players_in_every_tourney(rows: Iterable[Row]) -> Set[str]:
    """
    Player ids with at least two games in every tournament seen in `rows`.

    `rows` must arrive grouped by tournament (row-key order does this). Memory
    is bounded by the players of the current tournament plus the running
    intersection; nothing is buffered across tournament boundaries.

    Per tournament, `seen_once` holds ids met in exactly one game side so
    far and `current_group` ids met at least twice. When the tournament
    changes, the finished group is folded into `intersection`: the first
    finished group seeds it, later ones narrow it.

    A self-played game (winner id equals loser id) counts as two appearances,
    so one such game qualifies the player for that tournament. This follows
    the per-side counting above and is kept deliberately.
    """
    intersection: Set[str] = set()
    current_group: Set[str] = set()
    seen_once: Set[str] = set()

    current_tourney = None
    groups_seen = 0

    for row in rows:
        tourney = row.value(GAME_FAMILY, 'tourneyid')

        if groups_seen == 0 or tourney != current_tourney:
            if groups_seen == 1:
                intersection = set(current_group)
            elif groups_seen > 1:
                intersection &= current_group

            current_group.clear()
            seen_once.clear()
            current_tourney = tourney
            groups_seen += 1

        for family in (WINNER_FAMILY, LOSER_FAMILY):
            player = _text(row.value(family, 'id'))
            if player in seen_once:
                seen_once.discard(player)
                current_group.add(player)
            elif player not in current_group:
                seen_once.add(player)

    logger.debug(f"Q2 scanned {groups_seen} tournament group(s)")

    if groups_seen <= 1:
        return set(current_group)
    return intersection & current_group


# ============================================================================
# QUERY ENGINE
# ============================================================================

class GameQueries:
    """The three range-scan queries plus a row count, bound to one table."""

    def __init__(self, client: StoreClient, table_name: str = TABLE_NAME):
        self.client = client
        self.table_name = table_name

    def opponents_of_winner(self, tourney_id: Identifier, winner_name: str) -> List[str]:
        """
        Q1: loser ids of every game `winner_name` won in a tournament.

        One entry per matching game, in ascending game-id order; an opponent
        beaten twice appears twice.
        """
        start, stop = tourney_range(tourney_id)
        rows = self.client.scan(
            self.table_name, start, stop,
            cell_filter=CellFilter(WINNER_FAMILY, 'name', winner_name),
        )
        return [_text(row.value(LOSER_FAMILY, 'id')) for row in rows]

    def players_in_every_tourney(self, first_tourney_id: Identifier, last_tourney_id: Identifier) -> Set[str]:
        """
        Q2: ids of players with two or more games in every tournament of
        [first_tourney_id, last_tourney_id).

        The last tournament is excluded; pass last + 1 to include it. Only
        tournaments that have at least one game count.
        """
        first = parse_identifier(first_tourney_id)
        last = parse_identifier(last_tourney_id)
        if first >= last:
            logger.info(f"Empty tournament interval [{first}, {last}), nothing to scan")
            return set()

        start, stop = range_of_tourneys(first, last)
        return repeat_players_in_every_tourney(
            self.client.scan(self.table_name, start, stop)
        )

    def tied_games(self, tourney_id: Identifier) -> List[str]:
        """Q3: game ids of the tied games in a tournament, ascending."""
        start, stop = tourney_range(tourney_id)
        rows = self.client.scan(
            self.table_name, start, stop,
            cell_filter=CellFilter(GAME_FAMILY, 'tie', TIE_TRUE),
        )
        return [_text(row.value(GAME_FAMILY, 'gameid')) for row in rows]

    def count_records(self) -> int:
        """Number of non-empty rows in the table (full scan)."""
        count = 0
        for row in self.client.scan(self.table_name):
            if not row.is_empty():
                count += 1
        return count
