"""Exception taxonomy.

Storage failures are caught inside the store and logged; they only reach
callers who talk to a backend directly. InvalidValueError is the one
exception a Store raises on its own, when a caller hands it a value that
does not satisfy the schema.
"""

from __future__ import annotations


class StashError(Exception):
    """Base class for stashx errors."""


class BackendError(StashError):
    """The persistence backend failed."""

    def __init__(self, key: str | None, message: str) -> None:
        super().__init__(message)
        self.key = key


class BackendReadError(BackendError):
    """Stored data could not be read (permissions, corrupt file, bad JSON)."""


class BackendWriteError(BackendError):
    """A value could not be written durably."""


class InvalidValueError(StashError, ValueError):
    """A value passed to a store does not satisfy its schema."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"invalid value for {key!r}: {reason}")
        self.key = key
        self.reason = reason
