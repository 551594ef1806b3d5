import pytest

from scrabble.exceptions import MalformedRecordError
from scrabble.schemas import GameRecord


def test_from_fields_projects_positions(make_game):
    fields = make_game(123, 42153, "301", "302", winner_name="Alice", loser_name="Bob",
                       tie="True", round="7", division="C", date="2004-03-01", lexicon="TWL98")
    record = GameRecord.from_fields(fields)

    assert record.gameid == "123"
    assert record.tourneyid == "42153"
    assert record.tie == "True"
    assert record.round == "7"
    assert record.division == "C"
    assert record.date == "2004-03-01"
    assert record.lexicon == "TWL98"
    assert record.winner.id == "301"
    assert record.winner.name == "Alice"
    assert record.loser.id == "302"
    assert record.loser.name == "Bob"
    assert record.to_fields() == fields


def test_too_few_fields(make_game):
    fields = make_game(1, 1, "A", "B")[:18]
    with pytest.raises(MalformedRecordError) as excinfo:
        GameRecord.from_fields(fields, line_number=12)
    assert excinfo.value.field_count == 18
    assert excinfo.value.expected == 19
    assert "line 12" in str(excinfo.value)


def test_to_mutation(make_game):
    record = GameRecord.from_fields(make_game(123, 42153, "301", "302", winner_name="Alice"))
    mutation = record.to_mutation()

    assert mutation.row_key == b"00000421530000000123"
    assert len(mutation.cells) == 19
    cells = {(f, q): v for f, q, v in mutation.cells}
    assert cells[("Game", "tourneyid")] == b"42153"
    assert cells[("Game", "tie")] == b"False"
    assert cells[("Winner", "name")] == b"Alice"
    assert cells[("Loser", "id")] == b"302"


def test_non_ascii_names_are_utf8(make_game):
    record = GameRecord.from_fields(make_game(1, 1, "A", "B", winner_name="Ōsaka Ümlaut"))
    cells = {(f, q): v for f, q, v in record.to_mutation().cells}
    assert cells[("Winner", "name")] == "Ōsaka Ümlaut".encode("utf-8")
