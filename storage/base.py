"""
base.py - Store client contract shared by the HBase and SQL adapters.

Provides:
- Value types for schemas, mutations, filters and scanned rows
- StoreClient abstract base (admin, put, lazy range scan)
- Store error hierarchy

Row keys, families, qualifiers and values are handled as in HBase: keys and
values are raw bytes, families and qualifiers are strings.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

BytesLike = Union[bytes, str]


def to_bytes(value: BytesLike) -> bytes:
    """Encode str values as UTF-8; pass bytes through."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return str(value).encode('utf-8')


# =============================================================================
# ERRORS
# =============================================================================

class StoreError(Exception):
    """Any failure reported by the underlying store."""


class TableNotFoundError(StoreError):
    """The requested table does not exist."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Table '{table}' does not exist")


class TableExistsError(StoreError):
    """A table with this name already exists."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Table '{table}' already exists")


# =============================================================================
# VALUE TYPES
# =============================================================================

@dataclass(frozen=True)
class ColumnFamily:
    """Column family descriptor."""
    name: str
    max_versions: int = 3


@dataclass(frozen=True)
class TableSchema:
    """Table name plus its column families."""
    name: str
    families: Tuple[ColumnFamily, ...]

    def family_names(self) -> List[str]:
        return [f.name for f in self.families]


@dataclass
class Mutation:
    """All cells written to one row in a single put."""
    row_key: bytes
    cells: List[Tuple[str, str, bytes]] = field(default_factory=list)

    def __post_init__(self):
        self.row_key = to_bytes(self.row_key)

    def add(self, family: str, qualifier: str, value: BytesLike) -> "Mutation":
        self.cells.append((family, qualifier, to_bytes(value)))
        return self


@dataclass(frozen=True)
class CellFilter:
    """
    Single-column equality predicate evaluated by the store.

    Mirrors HBase's SingleColumnValueFilter with the EQUAL operator: rows
    whose latest family:qualifier value equals `value` pass. Rows lacking
    the column pass too unless `filter_if_missing` is set.
    """
    family: str
    qualifier: str
    value: BytesLike
    filter_if_missing: bool = False

    def matches(self, row: "Row") -> bool:
        current = row.value(self.family, self.qualifier)
        if current is None:
            return not self.filter_if_missing
        return current == to_bytes(self.value)


@dataclass
class Row:
    """One scanned row: key plus the latest value of each cell."""
    key: bytes
    cells: Dict[Tuple[str, str], bytes] = field(default_factory=dict)

    def value(self, family: str, qualifier: str) -> Optional[bytes]:
        return self.cells.get((family, qualifier))

    def text(self, family: str, qualifier: str) -> Optional[str]:
        raw = self.value(family, qualifier)
        return raw.decode('utf-8') if raw is not None else None

    def is_empty(self) -> bool:
        return not self.cells


# =============================================================================
# CLIENT CONTRACT
# =============================================================================

class StoreClient(ABC):
    """Connection to a wide-column store."""

    @abstractmethod
    def table_exists(self, name: str) -> bool:
        pass

    @abstractmethod
    def create_table(self, schema: TableSchema) -> None:
        """Create a table. Raises TableExistsError if it is already there."""
        pass

    @abstractmethod
    def disable_table(self, name: str) -> None:
        """Take a table offline. Raises TableNotFoundError if absent."""
        pass

    @abstractmethod
    def delete_table(self, name: str) -> None:
        """Drop a disabled table. Raises TableNotFoundError if absent."""
        pass

    @abstractmethod
    def is_table_enabled(self, name: str) -> bool:
        pass

    @abstractmethod
    def put(self, table: str, mutations: List[Mutation]) -> None:
        """Write a batch of mutations, one new version per cell."""
        pass

    @abstractmethod
    def scan(
        self,
        table: str,
        start: Optional[bytes] = None,
        stop: Optional[bytes] = None,
        cell_filter: Optional[CellFilter] = None,
    ) -> Iterator[Row]:
        """Lazily yield rows with start <= key < stop in ascending key order."""
        pass

    @abstractmethod
    def cell_versions(
        self, table: str, row_key: bytes, family: str, qualifier: str, limit: int = 1
    ) -> List[bytes]:
        """Stored versions of one cell, newest first."""
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
