"""
sql_store.py - Local wide-column store backed by SQLite through SQLAlchemy.

Implements the StoreClient contract with HBase semantics:
- Tables must be disabled before they can be deleted
- Every put writes a new timestamped version of each cell
- Versions beyond a family's max_versions are trimmed after each put
- Range scans stream rows in ascending row-key order, newest cell versions
  only, with an optional single-column equality filter
"""

import itertools
import logging
import time
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from .base import (
    CellFilter, Mutation, Row, StoreClient, StoreError, TableExistsError,
    TableNotFoundError, TableSchema, to_bytes,
)
from .database import Base, DEFAULT_DATABASE_URL, make_engine, make_session_factory
from .models import Cell, FamilyDescriptor, StoreTable

logger = logging.getLogger(__name__)

# Row keys per version-trimming statement (SQLite bound parameter limits)
TRIM_CHUNK_SIZE = 500


class SqlStore(StoreClient):
    """StoreClient over a SQLite database."""

    def __init__(self, url: str = DEFAULT_DATABASE_URL, scan_batch_size: int = 1000):
        self.url = url
        self.scan_batch_size = scan_batch_size
        self._last_ts = 0

        try:
            self.engine = make_engine(url)
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise StoreError(f"Could not open SQL store at {url}: {e}") from e

        self.SessionLocal = make_session_factory(self.engine)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @contextmanager
    def _session(self):
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError(f"SQL store failure: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @staticmethod
    def _require_table(session, name: str) -> StoreTable:
        table = session.get(StoreTable, name)
        if table is None:
            raise TableNotFoundError(name)
        return table

    def _require_enabled(self, session, name: str) -> StoreTable:
        table = self._require_table(session, name)
        if not table.enabled:
            raise StoreError(f"Table '{name}' is disabled")
        return table

    def _next_timestamp(self) -> int:
        """Millisecond timestamp, strictly increasing for this client."""
        now = int(time.time() * 1000)
        self._last_ts = max(now, self._last_ts + 1)
        return self._last_ts

    # -------------------------------------------------------------------------
    # Admin
    # -------------------------------------------------------------------------

    def table_exists(self, name: str) -> bool:
        with self._session() as session:
            return session.get(StoreTable, name) is not None

    def create_table(self, schema: TableSchema) -> None:
        if not schema.families:
            raise StoreError(f"Table '{schema.name}' needs at least one column family")

        with self._session() as session:
            if session.get(StoreTable, schema.name) is not None:
                raise TableExistsError(schema.name)

            table = StoreTable(name=schema.name, enabled=True)
            for family in schema.families:
                table.families.append(
                    FamilyDescriptor(family=family.name, max_versions=family.max_versions)
                )
            session.add(table)

        logger.info(f"Created table '{schema.name}' with families {schema.family_names()}")

    def disable_table(self, name: str) -> None:
        with self._session() as session:
            table = self._require_table(session, name)
            if not table.enabled:
                raise StoreError(f"Table '{name}' is already disabled")
            table.enabled = False

    def delete_table(self, name: str) -> None:
        with self._session() as session:
            table = self._require_table(session, name)
            if table.enabled:
                raise StoreError(f"Table '{name}' must be disabled before it is deleted")
            session.execute(
                delete(Cell)
                .where(Cell.table_name == name)
                .execution_options(synchronize_session=False)
            )
            session.delete(table)

    def is_table_enabled(self, name: str) -> bool:
        with self._session() as session:
            return bool(self._require_table(session, name).enabled)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def put(self, table: str, mutations: List[Mutation]) -> None:
        if not mutations:
            return

        with self._session() as session:
            descriptor = self._require_enabled(session, table)
            retention = {f.family: f.max_versions for f in descriptor.families}
            ts = self._next_timestamp()

            values = []
            for mutation in mutations:
                for family, qualifier, value in mutation.cells:
                    if family not in retention:
                        raise StoreError(
                            f"Unknown column family '{family}' for table '{table}'"
                        )
                    values.append({
                        'table_name': table,
                        'row_key': mutation.row_key,
                        'family': family,
                        'qualifier': qualifier,
                        'ts': ts,
                        'value': value,
                    })

            if not values:
                return

            # Same timestamp twice means the later write replaces the cell
            stmt = sqlite_insert(Cell.__table__)
            stmt = stmt.on_conflict_do_update(
                index_elements=['table_name', 'row_key', 'family', 'qualifier', 'ts'],
                set_={'value': stmt.excluded.value},
            )
            session.execute(stmt, values)

            row_keys = sorted({m.row_key for m in mutations})
            self._trim_versions(session, table, row_keys, retention)

    def _trim_versions(self, session, table: str, row_keys: List[bytes], retention: Dict[str, int]) -> None:
        for start in range(0, len(row_keys), TRIM_CHUNK_SIZE):
            chunk = row_keys[start:start + TRIM_CHUNK_SIZE]

            ranked = (
                select(
                    Cell.id.label('id'),
                    Cell.family.label('family'),
                    func.row_number().over(
                        partition_by=(Cell.row_key, Cell.family, Cell.qualifier),
                        order_by=Cell.ts.desc(),
                    ).label('version'),
                )
                .where(Cell.table_name == table, Cell.row_key.in_(chunk))
                .subquery()
            )
            stale = select(ranked.c.id).where(
                or_(*(
                    and_(ranked.c.family == family, ranked.c.version > max_versions)
                    for family, max_versions in retention.items()
                ))
            )
            session.execute(
                delete(Cell)
                .where(Cell.id.in_(stale))
                .execution_options(synchronize_session=False)
            )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def scan(
        self,
        table: str,
        start: Optional[bytes] = None,
        stop: Optional[bytes] = None,
        cell_filter: Optional[CellFilter] = None,
    ) -> Iterator[Row]:
        with self._session() as session:
            self._require_enabled(session, table)

            stmt = (
                select(Cell.row_key, Cell.family, Cell.qualifier, Cell.value)
                .where(Cell.table_name == table)
                .order_by(Cell.row_key, Cell.family, Cell.qualifier, Cell.ts.desc())
            )
            if start is not None:
                stmt = stmt.where(Cell.row_key >= to_bytes(start))
            if stop is not None:
                stmt = stmt.where(Cell.row_key < to_bytes(stop))

            result = session.execute(stmt.execution_options(yield_per=self.scan_batch_size))

            for row_key, versions in itertools.groupby(result, key=lambda r: r.row_key):
                row = Row(key=bytes(row_key))
                for version in versions:
                    # Newest version comes first within each cell
                    row.cells.setdefault((version.family, version.qualifier), bytes(version.value))

                if row.is_empty():
                    continue
                if cell_filter is not None and not cell_filter.matches(row):
                    continue
                yield row

    def cell_versions(
        self, table: str, row_key: bytes, family: str, qualifier: str, limit: int = 1
    ) -> List[bytes]:
        with self._session() as session:
            self._require_enabled(session, table)
            rows = session.execute(
                select(Cell.value)
                .where(
                    Cell.table_name == table,
                    Cell.row_key == to_bytes(row_key),
                    Cell.family == family,
                    Cell.qualifier == qualifier,
                )
                .order_by(Cell.ts.desc())
                .limit(limit)
            ).scalars().all()
            return [bytes(v) for v in rows]

    def close(self) -> None:
        self.engine.dispose()

    def __repr__(self):
        return f"<SqlStore(url='{self.url}')>"
