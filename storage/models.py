"""
models.py - SQLAlchemy ORM models emulating a wide-column table layout.

Every HBase cell version becomes one row of `cells`:
- row_key is stored as a BLOB, so SQLite compares it byte-wise (memcmp),
  which gives the same ordering as HBase row keys
- ts is the version timestamp in milliseconds; the newest version wins
- column family descriptors carry the max_versions retention setting

Indexes:
- ix_cell_row: range scans by (table_name, row_key)

Unique Constraint:
- (table_name, row_key, family, qualifier, ts): one value per cell version
"""

from sqlalchemy import (
    BigInteger, Boolean, Column, DateTime, ForeignKey, Index, Integer,
    LargeBinary, String, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class StoreTable(Base):
    """A table with its enabled flag."""
    __tablename__ = "store_tables"

    name = Column(String(255), primary_key=True)
    enabled = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    families = relationship(
        "FamilyDescriptor",
        back_populates="table",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<StoreTable(name='{self.name}', enabled={self.enabled})>"


class FamilyDescriptor(Base):
    """Column family of a table and its version retention."""
    __tablename__ = "column_families"

    table_name = Column(
        String(255),
        ForeignKey("store_tables.name", ondelete="CASCADE"),
        primary_key=True,
    )
    family = Column(String(255), primary_key=True)
    max_versions = Column(Integer, nullable=False, default=3)

    table = relationship("StoreTable", back_populates="families")

    def __repr__(self):
        return f"<FamilyDescriptor(table='{self.table_name}', family='{self.family}', max_versions={self.max_versions})>"


class Cell(Base):
    """One version of one cell."""
    __tablename__ = "cells"

    id = Column(Integer, primary_key=True, autoincrement=True)
    table_name = Column(String(255), nullable=False)
    row_key = Column(LargeBinary, nullable=False)
    family = Column(String(255), nullable=False)
    qualifier = Column(String(255), nullable=False)
    ts = Column(BigInteger, nullable=False)
    value = Column(LargeBinary, nullable=False)

    __table_args__ = (
        Index('ix_cell_row', 'table_name', 'row_key'),
        UniqueConstraint(
            'table_name', 'row_key', 'family', 'qualifier', 'ts',
            name='uq_cell_version',
        ),
    )

    def __repr__(self):
        return f"<Cell(table='{self.table_name}', row={self.row_key!r}, column='{self.family}:{self.qualifier}', ts={self.ts})>"
