"""
SQLite record store for embeddings.

Owns the durable set of (uuid, content, vector) records. Opening a store is
destructive: the embeddings table is dropped and recreated, so every open
starts from an empty collection.
"""

import sqlite3
import threading
import uuid
from contextlib import contextmanager
from typing import Generator, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from ..util.logging import logger
from ..vector import codec
from ..vector.types import EmbeddingRecord
from .config import ensure_db_directory
from .errors import InvalidInputError, NotOpenError, StorageUnavailableError

PROBE_CONTENT = "__semstore_probe__"
PROBE_VALUE = 0.1


class RecordStore:
    """SQLite-backed record collection with a fixed vector dimension."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.dimension: Optional[int] = None
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self, dimension: int) -> None:
        """(Re)initialize an empty record collection for vectors of length dimension."""
        if dimension < 1:
            raise InvalidInputError(f"dimension must be >= 1, got {dimension}")

        with self._lock:
            self.close()
            try:
                ensure_db_directory(self.db_path)
                self._conn = sqlite3.connect(
                    self.db_path, check_same_thread=False, isolation_level=None
                )
                self.dimension = dimension
                self._create_schema()
                self._self_check()
            except (sqlite3.Error, OSError) as e:
                self._discard_connection()
                raise StorageUnavailableError(f"cannot open store at {self.db_path}: {e}") from e
            except StorageUnavailableError:
                self._discard_connection()
                raise

        logger.log_lifecycle("open", self.db_path, dimension)

    def reset(self) -> None:
        """Drop every record and recreate the schema on an open store."""
        with self._lock:
            self._require_open()
            try:
                self._create_schema()
            except sqlite3.Error as e:
                raise StorageUnavailableError(f"cannot reset store at {self.db_path}: {e}") from e

        logger.log_lifecycle("reset", self.db_path, self.dimension)

    def _create_schema(self) -> None:
        cursor = self._conn.cursor()
        try:
            cursor.execute("BEGIN")
            cursor.execute("DROP TABLE IF EXISTS embeddings")
            cursor.execute("DROP TABLE IF EXISTS store_meta")
            cursor.execute('''
                CREATE TABLE embeddings (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    uuid TEXT NOT NULL UNIQUE,
                    content TEXT NOT NULL,
                    embedding BLOB NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')
            cursor.execute('''
                CREATE TABLE store_meta (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            ''')
            cursor.execute(
                "INSERT INTO store_meta (key, value) VALUES ('dimension', ?)",
                (str(self.dimension),)
            )
            self._conn.commit()
        except sqlite3.Error:
            self._conn.rollback()
            raise

    def _self_check(self) -> None:
        """Write and read back a probe vector, then roll it back."""
        probe = np.full(self.dimension, PROBE_VALUE, dtype=np.float32)
        cursor = self._conn.cursor()
        try:
            cursor.execute("BEGIN")
            cursor.execute(
                "INSERT INTO embeddings (uuid, content, embedding) VALUES (?, ?, ?)",
                (str(uuid.uuid4()), PROBE_CONTENT, codec.to_blob(probe))
            )
            cursor.execute("SELECT embedding FROM embeddings WHERE content = ?", (PROBE_CONTENT,))
            row = cursor.fetchone()
        finally:
            self._conn.rollback()

        if row is None or not np.array_equal(codec.from_blob(row[0], self.dimension), probe):
            raise StorageUnavailableError("probe vector did not round-trip through storage")

    def _require_open(self) -> sqlite3.Connection:
        if self._conn is None:
            raise NotOpenError()
        return self._conn

    @contextmanager
    def _transaction(self) -> Generator[sqlite3.Cursor, None, None]:
        """Run statements in one transaction; roll back and wrap database errors."""
        with self._lock:
            conn = self._require_open()
            cursor = conn.cursor()
            try:
                cursor.execute("BEGIN")
                yield cursor
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StorageUnavailableError(f"write to {self.db_path} failed: {e}") from e
            except BaseException:
                conn.rollback()
                raise

    def insert(self, content: str, sanitized_vector: np.ndarray) -> str:
        """Persist one record under a freshly generated identifier and return it."""
        return self.insert_many([(content, sanitized_vector)])[0]

    def insert_many(self, items: Iterable[Tuple[str, np.ndarray]]) -> List[str]:
        """Persist several records in a single all-or-nothing transaction."""
        rows = [(str(uuid.uuid4()), content, codec.to_blob(vector)) for content, vector in items]

        with self._transaction() as cursor:
            cursor.executemany(
                "INSERT INTO embeddings (uuid, content, embedding) VALUES (?, ?, ?)",
                rows
            )

        return [row[0] for row in rows]

    def scan_all(self) -> Iterator[EmbeddingRecord]:
        """
        Yield every stored record in insertion order.

        The rows present when the scan starts are read under the store lock,
        so the scan is a consistent snapshot; decoding happens lazily.
        """
        with self._lock:
            conn = self._require_open()
            dimension = self.dimension
            try:
                cursor = conn.cursor()
                cursor.execute("SELECT uuid, content, embedding FROM embeddings ORDER BY seq")
                rows = cursor.fetchall()
            except sqlite3.Error as e:
                raise StorageUnavailableError(f"read from {self.db_path} failed: {e}") from e

        return self._decode_rows(rows, dimension)

    @staticmethod
    def _decode_rows(rows, dimension: int) -> Iterator[EmbeddingRecord]:
        for record_id, content, blob in rows:
            yield EmbeddingRecord(
                id=record_id,
                content=content,
                vector=codec.from_blob(blob, dimension)
            )

    def count(self) -> int:
        """Number of stored records."""
        with self._lock:
            conn = self._require_open()
            try:
                return conn.execute("SELECT COUNT(*) FROM embeddings").fetchone()[0]
            except sqlite3.Error as e:
                raise StorageUnavailableError(f"read from {self.db_path} failed: {e}") from e

    def size_bytes(self) -> Optional[int]:
        """Database size from page statistics, None when unavailable."""
        with self._lock:
            conn = self._require_open()
            try:
                page_count = conn.execute("PRAGMA page_count").fetchone()[0]
                page_size = conn.execute("PRAGMA page_size").fetchone()[0]
            except sqlite3.Error:
                return None
        return page_count * page_size

    def health_check(self) -> bool:
        """Check that the store is open and its tables are readable."""
        try:
            with self._lock:
                conn = self._require_open()
                cursor = conn.cursor()
                cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
                table_names = [table[0] for table in cursor.fetchall()]
                if not all(table in table_names for table in ['embeddings', 'store_meta']):
                    return False

                cursor.execute("SELECT value FROM store_meta WHERE key = 'dimension'")
                row = cursor.fetchone()
                return row is not None and int(row[0]) == self.dimension
        except (NotOpenError, sqlite3.Error, ValueError):
            return False

    def close(self) -> None:
        """Release the connection; later operations raise NotOpenError."""
        with self._lock:
            if self._conn is None:
                return
            try:
                self._conn.close()
            except sqlite3.Error as e:
                logger.warning(f"Error closing store at {self.db_path}: {e}")
            finally:
                self._conn = None

        logger.log_lifecycle("close", self.db_path, self.dimension)

    def _discard_connection(self) -> None:
        if self._conn is not None:
            try:
                self._conn.close()
            except sqlite3.Error:
                pass
            self._conn = None
