"""
semstore: embedded semantic search over SQLite.

Stores text passages with fixed-length embeddings and answers cosine
nearest-neighbor queries with ranked, quality-labelled results.
"""

from .core.errors import (
    DimensionMismatchError,
    ErrorKind,
    InvalidInputError,
    NotOpenError,
    StorageUnavailableError,
    StoreError,
)
from .core.store import EmbeddingStore
from .vector.types import EmbeddingRecord, MatchQuality, ScoredResult, StoreStats

__version__ = "0.1.0"

__all__ = [
    'EmbeddingStore',
    'EmbeddingRecord',
    'ScoredResult',
    'StoreStats',
    'MatchQuality',
    'ErrorKind',
    'StoreError',
    'NotOpenError',
    'DimensionMismatchError',
    'StorageUnavailableError',
    'InvalidInputError',
]
