"""
Record and result types shared by the record store and the similarity index.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np


class MatchQuality(str, Enum):
    """Discrete match label derived from cosine distance."""

    EXCELLENT = "Excellent"
    VERY_GOOD = "Very Good"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


@dataclass(frozen=True)
class EmbeddingRecord:
    """A stored passage and its sanitized embedding."""

    id: str
    """UUID generated by the store at insertion time"""

    content: str
    """Original text, stored verbatim"""

    vector: np.ndarray = field(compare=False)
    """float32 vector of the store dimension, all components finite"""

    def __eq__(self, other):
        if not isinstance(other, EmbeddingRecord):
            return NotImplemented
        return (
            self.id == other.id
            and self.content == other.content
            and np.array_equal(self.vector, other.vector)
        )

    def __hash__(self):
        return hash(self.id)


@dataclass(frozen=True)
class ScoredResult:
    """Represents a ranked search hit."""

    id: str
    content: str
    distance: float
    """Cosine distance to the query, in [0, 2]"""

    similarity_percent: int
    """round((1 - distance) * 100) clamped to [0, 100]"""

    match_quality: MatchQuality


@dataclass(frozen=True)
class StoreStats:
    """Statistics about an open store."""

    total_records: int
    dimension: int
    db_path: str
    size_bytes: Optional[int]
