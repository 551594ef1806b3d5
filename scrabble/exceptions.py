"""
exceptions.py - Error types raised by the loader, key codec and CLI.

Store failures are defined next to the store contract (storage.base) and
re-exported from the scrabble package.
"""

from typing import Optional


class ScrabbleError(Exception):
    """Base class for all Scrabble loader errors."""


class InvalidIdentifier(ScrabbleError, ValueError):
    """A tournament or game id is not a non-negative 10-digit integer."""

    def __init__(self, value, reason: str = "expected a non-negative integer of at most 10 digits"):
        self.value = value
        super().__init__(f"Invalid identifier {value!r}: {reason}")


class MalformedRecordError(ScrabbleError):
    """A CSV record does not carry every field the schema projects."""

    def __init__(self, field_count: int, expected: int, line_number: Optional[int] = None):
        self.field_count = field_count
        self.expected = expected
        self.line_number = line_number
        where = f" on line {line_number}" if line_number is not None else ""
        super().__init__(
            f"Malformed record{where}: found {field_count} fields, expected at least {expected}"
        )


class MissingInputError(ScrabbleError):
    """The load folder or its input file does not exist."""

    def __init__(self, path, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"Input not found: {path}")
