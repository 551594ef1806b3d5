import pytest
import sys
import os

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from scrabble.config_loader import CONFIG_ENV_VAR, get_config
from scrabble.constants import CSV_HEADER, FIELD_COUNT, GAME_FIELD_INDEX, LOSER_FIELD_INDEX, WINNER_FIELD_INDEX
from scrabble.schema_manager import create_or_replace_table
from storage.sql_store import SqlStore

# In-memory SQLite store for testing
SQLALCHEMY_DATABASE_URL = "sqlite://"


@pytest.fixture(autouse=True)
def console_only_config(tmp_path, monkeypatch):
    """Point the config singleton at a test config that never writes log files."""
    config_path = tmp_path / "test_config.yaml"
    config_path.write_text(
        "logging:\n"
        "  level: WARNING\n"
        "  log_dir: null\n",
        encoding="utf-8",
    )
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_path))
    get_config().reload()
    yield config_path
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    get_config().reload()


@pytest.fixture(scope="function")
def store():
    """Fresh in-memory store for each test."""
    client = SqlStore(SQLALCHEMY_DATABASE_URL)
    try:
        yield client
    finally:
        client.close()


@pytest.fixture
def games_table(store):
    """Created ScrabbleGames table; yields its name."""
    schema = create_or_replace_table(store)
    return schema.name


@pytest.fixture
def make_game():
    """
    Build the 19 CSV fields of one game.

    Only the ids are required; everything else gets a plausible default.
    """
    def _make_game(gameid, tourneyid, winner_id, loser_id, winner_name=None, loser_name=None,
                   tie="False", **overrides):
        values = {
            'gameid': str(gameid),
            'tourneyid': str(tourneyid),
            'tie': tie,
            'round': '1',
            'division': 'A',
            'date': '2005-06-11',
            'lexicon': 'TWL06',
        }
        winner = {
            'id': str(winner_id),
            'name': winner_name or f"Player {winner_id}",
            'score': '412',
            'oldrating': '1500',
            'newrating': '1512',
            'pos': '1',
        }
        loser = {
            'id': str(loser_id),
            'name': loser_name or f"Player {loser_id}",
            'score': '388' if tie != "True" else '412',
            'oldrating': '1490',
            'newrating': '1478',
            'pos': '2',
        }
        for key, value in overrides.items():
            side, _, qualifier = key.partition('_')
            if side == 'winner':
                winner[qualifier] = value
            elif side == 'loser':
                loser[qualifier] = value
            else:
                values[key] = value

        fields = [''] * FIELD_COUNT
        for q, i in GAME_FIELD_INDEX.items():
            fields[i] = values[q]
        for q, i in WINNER_FIELD_INDEX.items():
            fields[i] = winner[q]
        for q, i in LOSER_FIELD_INDEX.items():
            fields[i] = loser[q]
        return fields

    return _make_game


@pytest.fixture
def write_games_csv(tmp_path):
    """Write games (lists of fields or raw lines) to <folder>/scrabble_games.csv."""
    def _write(games, folder_name="data", line_ending="\n"):
        folder = tmp_path / folder_name
        folder.mkdir(exist_ok=True)
        lines = [",".join(CSV_HEADER)]
        for game in games:
            lines.append(game if isinstance(game, str) else ",".join(game))
        with open(folder / "scrabble_games.csv", "w", encoding="utf-8", newline="") as f:
            f.write(line_ending.join(lines) + line_ending)
        return folder

    return _write


@pytest.fixture
def load_games(store, games_table, write_games_csv):
    """Write games to a CSV and bulk load them into the games table."""
    from etl.load_games import load_from_folder

    def _load(games, batch_size=100_000):
        folder = write_games_csv(games)
        return load_from_folder(store, folder, table_name=games_table, batch_size=batch_size)

    return _load
