import pytest

from storage import connect
from storage.base import (
    CellFilter, ColumnFamily, Mutation, StoreError, TableExistsError,
    TableNotFoundError, TableSchema,
)
from storage.sql_store import SqlStore

SCHEMA = TableSchema("T", (ColumnFamily("cf", max_versions=3), ColumnFamily("other", max_versions=1)))


@pytest.fixture
def table(store):
    store.create_table(SCHEMA)
    return SCHEMA.name


def _put(store, table, key, **cells):
    mutation = Mutation(key)
    for qualifier, value in cells.items():
        mutation.add("cf", qualifier, value)
    store.put(table, [mutation])


def test_create_table_twice_fails(store, table):
    assert store.table_exists(table)
    with pytest.raises(TableExistsError):
        store.create_table(SCHEMA)


def test_table_lifecycle(store, table):
    assert store.is_table_enabled(table)

    with pytest.raises(StoreError):
        store.delete_table(table)  # still enabled

    store.disable_table(table)
    assert not store.is_table_enabled(table)
    with pytest.raises(StoreError):
        store.disable_table(table)

    store.delete_table(table)
    assert not store.table_exists(table)


def test_missing_table_errors(store):
    with pytest.raises(TableNotFoundError):
        store.disable_table("nope")
    with pytest.raises(TableNotFoundError):
        store.delete_table("nope")
    with pytest.raises(TableNotFoundError):
        store.is_table_enabled("nope")
    with pytest.raises(TableNotFoundError):
        list(store.scan("nope"))


def test_scan_returns_rows_in_key_order(store, table):
    for key in [b"0003", b"0001", b"0010", b"0002"]:
        _put(store, table, key, v=key)

    keys = [row.key for row in store.scan(table)]
    assert keys == [b"0001", b"0002", b"0003", b"0010"]


def test_scan_range_is_half_open(store, table):
    for key in [b"a", b"b", b"c", b"d"]:
        _put(store, table, key, v="x")

    keys = [row.key for row in store.scan(table, start=b"b", stop=b"d")]
    assert keys == [b"b", b"c"]
    assert list(store.scan(table, start=b"b", stop=b"b")) == []


def test_scan_groups_cells_into_rows(store, table):
    mutation = Mutation(b"r1").add("cf", "a", "1").add("cf", "b", "2").add("other", "c", "3")
    store.put(table, [mutation])

    rows = list(store.scan(table))
    assert len(rows) == 1
    row = rows[0]
    assert row.value("cf", "a") == b"1"
    assert row.value("cf", "b") == b"2"
    assert row.text("other", "c") == "3"
    assert row.value("cf", "missing") is None


def test_cell_filter(store, table):
    _put(store, table, b"r1", name="Alice")
    _put(store, table, b"r2", name="Bob")
    _put(store, table, b"r3", other="no name")

    matched = [r.key for r in store.scan(table, cell_filter=CellFilter("cf", "name", "Alice"))]
    # Rows without the column pass unless filter_if_missing is set
    assert matched == [b"r1", b"r3"]

    strict = CellFilter("cf", "name", "Alice", filter_if_missing=True)
    assert [r.key for r in store.scan(table, cell_filter=strict)] == [b"r1"]


def test_filter_compares_bytes_exactly(store, table):
    _put(store, table, b"r1", name="alice")
    strict = CellFilter("cf", "name", "Alice", filter_if_missing=True)
    assert list(store.scan(table, cell_filter=strict)) == []


def test_versions_are_retained_up_to_max(store, table):
    for i in range(5):
        _put(store, table, b"r1", v=str(i))

    versions = store.cell_versions(table, b"r1", "cf", "v", limit=10)
    assert versions == [b"4", b"3", b"2"]

    (row,) = list(store.scan(table))
    assert row.value("cf", "v") == b"4"


def test_versions_trimmed_per_family(store, table):
    for i in range(3):
        store.put(table, [Mutation(b"r1").add("other", "v", str(i))])
    assert store.cell_versions(table, b"r1", "other", "v", limit=10) == [b"2"]


def test_put_unknown_family_fails(store, table):
    with pytest.raises(StoreError):
        store.put(table, [Mutation(b"r1").add("nope", "q", "v")])
    assert list(store.scan(table)) == []


def test_put_to_disabled_table_fails(store, table):
    store.disable_table(table)
    with pytest.raises(StoreError):
        _put(store, table, b"r1", v="x")
    with pytest.raises(StoreError):
        list(store.scan(table))


def test_empty_put_is_noop(store, table):
    store.put(table, [])
    assert list(store.scan(table)) == []


def test_scan_is_lazy(store, table):
    for i in range(5):
        _put(store, table, f"{i:04d}".encode(), v=str(i))

    rows = store.scan(table)
    first = next(rows)
    assert first.key == b"0000"
    rows.close()


def test_file_store_persists(tmp_path):
    url = f"sqlite:///{tmp_path / 'games.db'}"
    with SqlStore(url) as first:
        first.create_table(SCHEMA)
        first.put("T", [Mutation(b"r1").add("cf", "v", "1")])

    with connect(url) as second:
        assert [r.key for r in second.scan("T")] == [b"r1"]


def test_non_sqlite_url_rejected():
    with pytest.raises(ValueError):
        SqlStore("postgresql://localhost/games")
