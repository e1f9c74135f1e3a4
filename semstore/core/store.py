"""
EmbeddingStore facade.

Composes the vector codec, the SQLite record store and the similarity index
into the operations callers use: open, store, search and close. Each
EmbeddingStore instance is its own handle; nothing is shared process-wide.
"""

from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from pydantic import ValidationError

from ..util.logging import logger, sanitize_details
from ..vector import codec
from ..vector.embeddings import IEmbeddingProvider
from ..vector.index import SimilarityIndex
from ..vector.types import EmbeddingRecord, ScoredResult, StoreStats
from . import config
from .db import RecordStore
from .errors import InvalidInputError, StoreError
from .schema import SearchRequest, StoreRequest

StatusCallback = Callable[[str], None]


def _validation_message(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in error.errors()
    )


class EmbeddingStore:
    """
    Semantic search store over (content, embedding) records.

    open() is destructive: it discards every previously persisted record and
    starts from an empty schema. Use reset() to clear an already-open store.
    """

    def __init__(self, db_path: str = None, dimension: int = None,
                 thresholds: Sequence[float] = None,
                 embedding_provider: Optional[IEmbeddingProvider] = None):
        self.db_path = config.DB_PATH if db_path is None else db_path
        self.dimension = config.EMBED_DIM if dimension is None else dimension
        self.embedding_provider = embedding_provider

        self._records = RecordStore(self.db_path)
        self._index = SimilarityIndex(
            self._records,
            thresholds if thresholds is not None else config.get_match_thresholds()
        )
        self._status = "closed"
        self._subscribers: List[StatusCallback] = []

    # Status signal

    @property
    def status(self) -> str:
        """Latest human-readable status message."""
        return self._status

    def subscribe(self, callback: StatusCallback) -> Callable[[], None]:
        """Register a status callback; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _report(self, message: str) -> None:
        self._status = message
        logger.log_status(message)
        for callback in list(self._subscribers):
            callback(message)

    # Lifecycle

    @property
    def is_open(self) -> bool:
        return self._records.is_open

    def open(self) -> "EmbeddingStore":
        """Open the store, dropping any previously persisted records."""
        self._report(f"Opening store at {self.db_path}")
        try:
            self._records.open(self.dimension)
        except StoreError as e:
            logger.log_failure("store.open", e, {"db_path": self.db_path})
            self._report(f"Failed to open store: {e.message}")
            raise
        self._report(f"Store ready (dimension {self.dimension}, 0 records)")
        return self

    def reset(self) -> None:
        """Discard every record of an open store."""
        try:
            self._records.reset()
        except StoreError as e:
            logger.log_failure("store.reset", e)
            raise
        self._report("Store reset (0 records)")

    def close(self) -> None:
        self._records.close()
        self._report("closed")

    def __enter__(self) -> "EmbeddingStore":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # Writes

    def _validate_item(self, content: str, vector) -> Tuple[str, np.ndarray, int]:
        try:
            request = StoreRequest(content=content)
        except ValidationError as e:
            raise InvalidInputError(_validation_message(e)) from e

        sanitized, repaired = codec.validate_with_count(vector, self.dimension)
        return request.content, sanitized, repaired

    def store(self, content: str, vector) -> str:
        """
        Store a passage with its embedding.

        Args:
            content: Non-empty text, stored verbatim
            vector: Embedding of the store dimension; non-finite components
                are stored as 0.0

        Returns:
            The generated record identifier

        Raises:
            InvalidInputError: If content is empty
            DimensionMismatchError: If the vector has the wrong length
            NotOpenError: If the store is not open
        """
        try:
            content, sanitized, repaired = self._validate_item(content, vector)
            record_id = self._records.insert(content, sanitized)
        except StoreError as e:
            logger.log_failure("store.insert", e, sanitize_details({"content": str(content)}))
            raise

        logger.log_store_operation(record_id, content, self.dimension, sanitized=repaired)
        return record_id

    def store_many(self, items: Iterable[Tuple[str, Sequence[float]]]) -> List[str]:
        """
        Store several passages in one all-or-nothing transaction.

        Every item is validated before anything is written, so one bad item
        leaves the store unchanged.
        """
        items = list(items)
        total = len(items)
        self._report(f"Validating {total} records")

        validated = []
        try:
            for position, (content, vector) in enumerate(items, start=1):
                validated.append(self._validate_item(content, vector))
                if position % 100 == 0:
                    self._report(f"Validated {position}/{total} records")

            record_ids = self._records.insert_many(
                (content, sanitized) for content, sanitized, _ in validated
            )
        except StoreError as e:
            logger.log_failure("store.insert_many", e, {"items": total, "validated": len(validated)})
            self._report(f"Bulk insert failed: {e.message}")
            raise

        for record_id, (content, _, repaired) in zip(record_ids, validated):
            logger.log_store_operation(record_id, content, self.dimension, sanitized=repaired)

        self._report(f"Stored {len(record_ids)}/{total} records")
        return record_ids

    def store_texts(self, texts: Sequence[str]) -> List[str]:
        """Embed texts with the configured provider and store them."""
        provider = self._require_provider()
        self._report(f"Embedding {len(texts)} texts")
        vectors = provider.embed(list(texts))
        return self.store_many(zip(texts, vectors))

    # Reads

    def search(self, query_vector, k: int = None,
               min_similarity: Optional[float] = None) -> List[ScoredResult]:
        """
        Find the stored passages closest to query_vector.

        Args:
            query_vector: Query embedding of the store dimension
            k: Maximum number of results (0 returns none)
            min_similarity: Optional similarity fraction in [0, 1]; results
                with distance above 1 - min_similarity are dropped before
                truncating to k

        Returns:
            Ranked results, closest first

        Raises:
            InvalidInputError: For negative k or an out-of-range threshold
            DimensionMismatchError: If the query has the wrong length
            NotOpenError: If the store is not open
        """
        try:
            try:
                request = SearchRequest(
                    k=config.DEFAULT_TOP_K if k is None else k,
                    min_similarity=min_similarity
                )
            except ValidationError as e:
                raise InvalidInputError(_validation_message(e)) from e

            return self._index.search(query_vector, request.k, max_distance=request.max_distance)
        except StoreError as e:
            logger.log_failure("index.search", e, {"k": k, "min_similarity": min_similarity})
            raise

    def search_text(self, text: str, k: int = None,
                    min_similarity: Optional[float] = None) -> List[ScoredResult]:
        """Embed a query text with the configured provider and search."""
        provider = self._require_provider()
        return self.search(provider.embed_text(text), k, min_similarity)

    def scan_all(self) -> Iterable[EmbeddingRecord]:
        """Every stored record in insertion order."""
        return self._records.scan_all()

    def count(self) -> int:
        return self._records.count()

    def stats(self) -> StoreStats:
        """Record count, dimension and database size of the open store."""
        return StoreStats(
            total_records=self._records.count(),
            dimension=self.dimension,
            db_path=self.db_path,
            size_bytes=self._records.size_bytes(),
        )

    def health_check(self) -> bool:
        return self._records.health_check()

    def _require_provider(self) -> IEmbeddingProvider:
        if self.embedding_provider is None:
            raise InvalidInputError("no embedding provider configured for this store")
        return self.embedding_provider
