"""
Spare Parts API exception hierarchy.

Source-level errors abort a load and leave the active snapshot untouched.
Row-level errors are logged and the row is skipped.
"""
from __future__ import annotations


class PartsError(Exception):
    """Base exception for all spare-parts failures."""


class IngestionError(PartsError):
    """Raised when the source file cannot be read or the snapshot cannot be built."""


class SourceNotFoundError(IngestionError):
    """Raised when the source file does not exist at load time."""


class RowDecodeError(PartsError):
    """Raised for a single row that cannot be turned into a record."""


class QueryError(PartsError):
    """Raised for unexpected failures while computing a query result."""
