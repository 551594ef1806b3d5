"""
cli.py - Command-line dispatcher for the Scrabble games store.

Usage:
    hbase-scrabble <zkHost>:<zkPort> createTable
    hbase-scrabble <zkHost>:<zkPort> loadTable    <folder>
    hbase-scrabble <zkHost>:<zkPort> query1       <tourneyId> <winnerName>
    hbase-scrabble <zkHost>:<zkPort> query2       <firstTourneyId> <lastTourneyId>
    hbase-scrabble <zkHost>:<zkPort> query3       <tourneyId>
    hbase-scrabble <zkHost>:<zkPort> countRecords

The store address may also be a SQLite URL (sqlite:///scrabble_store.db) to
run against the local store. Actions are case-insensitive.

Exit codes: 0 success, -1 usage error, -2 missing load folder, 1 store or
input failure.
"""

import logging
import sys
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from dotenv import load_dotenv

from etl.load_games import load_from_folder
from storage import StoreClient, StoreError, connect

from .config_loader import ConfigLoader, get_config
from .exceptions import InvalidIdentifier, MalformedRecordError, MissingInputError
from .key_codec import parse_identifier
from .logging_setup import setup_logging
from .queries import GameQueries
from .schema_manager import create_or_replace_table

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = -1
EXIT_MISSING_INPUT = -2

USAGE = (
    "Error: \n"
    "1) ZK_HOST:ZK_PORT (or a sqlite:/// URL), \n"
    "2) action [createTable, loadTable, query1, query2, query3, countRecords], \n"
    "3) Extra parameters for loadTable and queries:\n"
    "\ta) If loadTable: csvsFolder.\n"
    "\tb) If query1: tourneyid winnername.\n"
    "\tc) If query2: firsttourneyid lasttourneyid.\n"
    "\td) If query3: tourneyid.\n"
)


def _format_list(items: Sequence[str]) -> str:
    return "[" + ", ".join(items) + "]"


# =============================================================================
# ACTIONS
# =============================================================================

def run_create_table(client: StoreClient, config: ConfigLoader, params: List[str]) -> None:
    schema = create_or_replace_table(client, config.get_table_name(), config.get_max_versions())
    print(f"Created table {schema.name} with column families {', '.join(schema.family_names())}.")


def run_load_table(client: StoreClient, config: ConfigLoader, params: List[str]) -> None:
    summary = load_from_folder(
        client,
        params[0],
        table_name=config.get_table_name(),
        **config.get_loader_options(),
    )
    print(f"Loaded {summary.rows} records in {summary.batches} batch(es).")


def run_query1(client: StoreClient, config: ConfigLoader, params: List[str]) -> None:
    tourney_id, winner_name = params
    opponents = GameQueries(client, config.get_table_name()).opponents_of_winner(tourney_id, winner_name)
    print(f"There are {len(opponents)} opponents of winner {winner_name} that play in tourney {tourney_id}.")
    print(f"The list of opponents is: {_format_list(opponents)}")


def run_query2(client: StoreClient, config: ConfigLoader, params: List[str]) -> None:
    first, last = params
    players = sorted(GameQueries(client, config.get_table_name()).players_in_every_tourney(first, last))
    print(
        f"There are {len(players)} players that participated more than once in every tourney "
        f"between tourneyid {first} and tourneyid {last}."
    )
    print(f"The list of players is: {_format_list(players)}")


def run_query3(client: StoreClient, config: ConfigLoader, params: List[str]) -> None:
    tourney_id = params[0]
    games = GameQueries(client, config.get_table_name()).tied_games(tourney_id)
    print(f"There are {len(games)} games that ended in a tie in tourneyid {tourney_id}.")
    print(f"The list of games is: {_format_list(games)}")


def run_count_records(client: StoreClient, config: ConfigLoader, params: List[str]) -> None:
    total = GameQueries(client, config.get_table_name()).count_records()
    print(f"Total rows in table: {total}")


Action = Callable[[StoreClient, ConfigLoader, List[str]], None]

# action token -> (parameter names, handler, positions of tournament ids)
ACTIONS: Dict[str, Tuple[Tuple[str, ...], Action, Tuple[int, ...]]] = {
    'CREATETABLE': ((), run_create_table, ()),
    'LOADTABLE': (('csvsFolder',), run_load_table, ()),
    'QUERY1': (('tourneyid', 'winnername'), run_query1, (0,)),
    'QUERY2': (('firsttourneyid', 'lasttourneyid'), run_query2, (0, 1)),
    'QUERY3': (('tourneyid',), run_query3, (0,)),
    'COUNTRECORDS': ((), run_count_records, ()),
}


# =============================================================================
# ENTRY POINT
# =============================================================================

def _usage_error(message: Optional[str] = None) -> int:
    if message:
        print(f"Error: {message}")
    print(USAGE)
    return EXIT_USAGE


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    if len(args) < 2:
        return _usage_error()

    address, action_token, params = args[0], args[1], args[2:]
    action = action_token.upper()

    if action not in ACTIONS:
        return _usage_error(f"unknown action '{action_token}'")

    param_names, handler, id_positions = ACTIONS[action]
    if len(params) != len(param_names):
        expected = " ".join(param_names) or "no parameters"
        return _usage_error(f"{action_token} expects: {expected}")

    for position in id_positions:
        params[position] = params[position].strip()
        try:
            parse_identifier(params[position])
        except InvalidIdentifier as e:
            return _usage_error(str(e))

    if action == 'LOADTABLE' and not Path(params[0]).is_dir():
        print(f"Error: Folder {params[0]} does not exist.")
        return EXIT_MISSING_INPUT

    load_dotenv()
    config = get_config()
    setup_logging(**config.get_logging_options())

    start = time.perf_counter()
    try:
        client = connect(address, **config.get_thrift_options())
    except ValueError as e:
        return _usage_error(str(e))
    except StoreError as e:
        logger.error(f"Could not open store: {e}")
        return EXIT_FAILURE

    try:
        with client:
            handler(client, config, params)
    except MissingInputError as e:
        print(f"Error: {e}")
        return EXIT_MISSING_INPUT
    except (StoreError, MalformedRecordError, InvalidIdentifier) as e:
        logger.error(f"{action_token} failed: {e}")
        return EXIT_FAILURE

    elapsed = time.perf_counter() - start
    logger.info(f"{action_token} took {elapsed:.3f} seconds.")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
