"""
Embedding store configuration.
All settings come from environment variables (optionally via a .env file).
"""

import os
from pathlib import Path
from typing import List, Tuple

from dotenv import load_dotenv

load_dotenv()

# Database path configuration (":memory:" keeps the store in RAM)
DB_PATH = os.getenv("EMBED_DB_PATH", "./data/vector_db.db")

# Fixed vector dimension for the lifetime of a store
EMBED_DIM = int(os.getenv("EMBED_DIM", "512"))

# Embedding collaborator
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", "hash")  # hash|sine|sentence
EMBED_MODEL_NAME = os.getenv("EMBED_MODEL_NAME", "distiluse-base-multilingual-cased-v2")

# Match-quality boundaries, inclusive, ascending: Excellent|Very Good|Good|Fair
DEFAULT_MATCH_THRESHOLDS = (0.15, 0.30, 0.45, 0.60)
MATCH_QUALITY_THRESHOLDS = os.getenv("MATCH_QUALITY_THRESHOLDS", "0.15,0.30,0.45,0.60")

DEFAULT_TOP_K = int(os.getenv("DEFAULT_TOP_K", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def parse_thresholds(raw: str) -> Tuple[float, float, float, float]:
    """Parse four ascending comma-separated distance boundaries."""
    try:
        values = tuple(float(part) for part in raw.split(","))
    except ValueError as e:
        raise ValueError(f"Invalid MATCH_QUALITY_THRESHOLDS {raw!r}: {e}") from e

    if len(values) != 4:
        raise ValueError(f"MATCH_QUALITY_THRESHOLDS needs 4 values, got {len(values)}")
    if list(values) != sorted(values):
        raise ValueError(f"MATCH_QUALITY_THRESHOLDS must be ascending, got {raw!r}")
    return values


def get_match_thresholds() -> Tuple[float, float, float, float]:
    """Get the configured match-quality boundaries (read dynamically)."""
    return parse_thresholds(os.getenv("MATCH_QUALITY_THRESHOLDS", MATCH_QUALITY_THRESHOLDS))


def get_embedding_provider(dimension: int = None):
    """Get configured embedding provider implementation."""
    dimension = dimension or EMBED_DIM
    provider = os.getenv("EMBED_PROVIDER", EMBED_PROVIDER)

    if provider == "sine":
        from semstore.vector.embeddings import SineTestEmbedding
        return SineTestEmbedding(dimension)
    elif provider == "sentence":
        from semstore.vector.embeddings import SentenceTransformerEmbedding
        return SentenceTransformerEmbedding(os.getenv("EMBED_MODEL_NAME", EMBED_MODEL_NAME))
    else:
        from semstore.vector.embeddings import DeterministicHashEmbedding
        return DeterministicHashEmbedding(dimension)


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def ensure_db_directory(db_path: str = None):
    """Ensure the database directory exists."""
    db_path = db_path or DB_PATH
    if db_path == ":memory:":
        return
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)


def validate_config() -> List[str]:
    """Validate configuration and return any issues."""
    issues = []

    if EMBED_DIM < 1:
        issues.append("EMBED_DIM must be >= 1")

    if EMBED_PROVIDER not in ["hash", "sine", "sentence"]:
        issues.append(f"Invalid EMBED_PROVIDER: {EMBED_PROVIDER}")

    if DEFAULT_TOP_K < 0:
        issues.append("DEFAULT_TOP_K must be >= 0")

    try:
        get_match_thresholds()
    except ValueError as e:
        issues.append(str(e))

    return issues
