"""
database.py - SQLAlchemy configuration for the local SQL-backed store.

Provides:
- Engine factory for SQLite URLs (file or in-memory)
- Session factory bound to an engine
- Declarative Base shared by the ORM models
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Default location for the local store - SQLite at project root
DEFAULT_DATABASE_URL = "sqlite:///./scrabble_store.db"

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")

# Base class for ORM models
Base = declarative_base()


def make_engine(url: str = DEFAULT_DATABASE_URL) -> Engine:
    """
    Create an engine for a SQLite URL.

    In-memory databases use a StaticPool so every session sees the same
    connection (and therefore the same data).
    """
    if not url.startswith("sqlite"):
        raise ValueError(f"Only SQLite URLs are supported by the local store, got '{url}'")

    kwargs = {"connect_args": {"check_same_thread": False}}
    if url in IN_MEMORY_URLS:
        kwargs["poolclass"] = StaticPool

    return create_engine(url, **kwargs)


def make_session_factory(engine: Engine) -> sessionmaker:
    """Session factory - creates new database sessions bound to `engine`."""
    return sessionmaker(autoflush=False, bind=engine)
