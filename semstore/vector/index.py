"""
Brute-force cosine similarity search over a record store.
"""

import time
from typing import List, Optional, Sequence

from ..core.config import DEFAULT_MATCH_THRESHOLDS
from ..util.logging import logger
from . import codec
from .types import MatchQuality, ScoredResult

QUALITY_LADDER = (
    MatchQuality.EXCELLENT,
    MatchQuality.VERY_GOOD,
    MatchQuality.GOOD,
    MatchQuality.FAIR,
)


def classify_match_quality(distance: float,
                           thresholds: Sequence[float] = DEFAULT_MATCH_THRESHOLDS) -> MatchQuality:
    """Map a cosine distance to a quality label; first inclusive boundary wins."""
    for boundary, quality in zip(thresholds, QUALITY_LADDER):
        if distance <= boundary:
            return quality
    return MatchQuality.POOR


def similarity_percent(distance: float) -> int:
    """Display similarity as a whole percentage clamped to [0, 100]."""
    return int(min(100, max(0, round((1.0 - distance) * 100))))


class SimilarityIndex:
    """
    Ranks every record of a RecordStore against a query vector.

    Each search is a full O(n*D) scan; ties keep scan order so results are
    deterministic for a fixed store state.
    """

    def __init__(self, record_store, thresholds: Sequence[float] = DEFAULT_MATCH_THRESHOLDS):
        self.record_store = record_store
        self.thresholds = tuple(thresholds)

    def search(self, query_vector, k: int, max_distance: Optional[float] = None) -> List[ScoredResult]:
        """
        Search for the k records closest to query_vector.

        Args:
            query_vector: Query embedding of the store dimension
            k: Maximum number of results; k <= 0 returns no results
            max_distance: Optional cutoff; results farther than this are dropped
                before truncating to k

        Returns:
            Results ordered by ascending cosine distance

        Raises:
            NotOpenError: If the record store is not open
            DimensionMismatchError: If the query has the wrong length
        """
        start_time = time.time()

        # Scanning first surfaces NotOpenError before the dimension is known
        records = self.record_store.scan_all()
        query = codec.validate(query_vector, self.record_store.dimension)

        if k <= 0:
            return []

        scored = []
        candidates = 0
        for record in records:
            candidates += 1
            scored.append((codec.distance_cosine(record.vector, query), record))

        # sorted() is stable: equal distances keep scan order
        scored = sorted(scored, key=lambda item: item[0])

        if max_distance is not None:
            scored = [item for item in scored if item[0] <= max_distance]

        results = [
            ScoredResult(
                id=record.id,
                content=record.content,
                distance=distance,
                similarity_percent=similarity_percent(distance),
                match_quality=classify_match_quality(distance, self.thresholds),
            )
            for distance, record in scored[:k]
        ]

        logger.log_search_operation(
            k=k,
            candidates=candidates,
            returned=len(results),
            duration_ms=(time.time() - start_time) * 1000,
            details={"max_distance": max_distance} if max_distance is not None else None,
        )

        return results
