"""
Error taxonomy for the embedding store.
Every failure raised by the store carries an ErrorKind so callers can branch
on the kind instead of parsing message text.
"""

from enum import Enum


class ErrorKind(str, Enum):
    NOT_OPEN = "NotOpen"
    DIMENSION_MISMATCH = "DimensionMismatch"
    STORAGE_UNAVAILABLE = "StorageUnavailable"
    INVALID_INPUT = "InvalidInput"


class StoreError(Exception):
    """Base class for all embedding store failures."""

    kind: ErrorKind = ErrorKind.STORAGE_UNAVAILABLE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class NotOpenError(StoreError):
    """Operation issued before open() or after close()."""

    kind = ErrorKind.NOT_OPEN

    def __init__(self, message: str = "embedding store is not open"):
        super().__init__(message)


class DimensionMismatchError(StoreError, ValueError):
    """Vector length does not match the store dimension."""

    kind = ErrorKind.DIMENSION_MISMATCH

    def __init__(self, expected: int, actual):
        super().__init__(f"expected vector of dimension {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class StorageUnavailableError(StoreError):
    """The underlying SQLite resource cannot be created, opened or read."""

    kind = ErrorKind.STORAGE_UNAVAILABLE


class InvalidInputError(StoreError, ValueError):
    """Empty content, bad k, out-of-range threshold and similar caller errors."""

    kind = ErrorKind.INVALID_INPUT
