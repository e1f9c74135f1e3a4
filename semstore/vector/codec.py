"""
Vector validation, encoding and cosine distance.

Every vector entering the store (stored or queried) goes through validate(),
which enforces the store dimension and repairs non-finite components to 0.0.
Dimension mismatches are always rejected; non-finite values are the one kind
of bad input that is repaired instead.
"""

from typing import Sequence, Tuple, Union

import numpy as np

from ..core.errors import DimensionMismatchError, InvalidInputError, StorageUnavailableError

VectorLike = Union[Sequence[float], np.ndarray]

# Physical column format: little-endian float32
BLOB_DTYPE = np.dtype("<f4")


def sanitize(vector: VectorLike) -> Tuple[np.ndarray, int]:
    """Return a float32 copy with non-finite entries set to 0.0, and how many were repaired."""
    try:
        array = np.array(vector, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"vector must contain only numbers: {e}") from e

    mask = ~np.isfinite(array)
    repaired = int(mask.sum())
    if repaired:
        array[mask] = 0.0

    # Values beyond float32 range overflow to inf on the cast
    with np.errstate(over="ignore"):
        result = array.astype(np.float32)
    overflow = ~np.isfinite(result)
    if overflow.any():
        result[overflow] = 0.0
        repaired += int(overflow.sum())

    return result, repaired


def validate(vector: VectorLike, dimension: int) -> np.ndarray:
    """
    Validate a vector against the store dimension and sanitize it.

    Args:
        vector: Sequence of numbers (list, tuple or numpy array)
        dimension: Expected vector length

    Returns:
        float32 numpy array of length dimension with every component finite

    Raises:
        DimensionMismatchError: If the vector is not 1-D of length dimension
        InvalidInputError: If a component is not a number
    """
    return validate_with_count(vector, dimension)[0]


def validate_with_count(vector: VectorLike, dimension: int) -> Tuple[np.ndarray, int]:
    """Same as validate(), also returning the number of repaired components."""
    if vector is None:
        raise InvalidInputError("vector is required")

    shape = np.shape(vector)
    if len(shape) != 1:
        raise DimensionMismatchError(dimension, shape)
    if shape[0] != dimension:
        raise DimensionMismatchError(dimension, shape[0])

    return sanitize(vector)


def _format_component(value: np.float32) -> str:
    # Shortest text that round-trips the float32 value
    text = np.format_float_positional(value, unique=True, trim="-")
    return "0" if text == "-0" else text


def encode(vector: VectorLike) -> str:
    """
    Encode a sanitized vector as a bracketed, comma-separated literal.

    Each component is written as the shortest text that round-trips its
    float32 value, except that -0.0 is written as 0, so decode() returns +0.0.
    """
    array = np.asarray(vector, dtype=np.float32)
    return "[" + ", ".join(_format_component(v) for v in array) + "]"


def decode(literal: str, dimension: int = None) -> np.ndarray:
    """Parse a literal produced by encode() back into a float32 vector."""
    text = literal.strip() if isinstance(literal, str) else ""
    if not text.startswith("[") or not text.endswith("]"):
        raise InvalidInputError(f"vector literal must be bracketed, got {literal!r}")

    body = text[1:-1].strip()
    try:
        values = [float(part) for part in body.split(",")] if body else []
    except ValueError as e:
        raise InvalidInputError(f"invalid vector literal: {e}") from e

    if dimension is not None:
        return validate(values, dimension)
    return sanitize(values)[0]


def to_blob(vector: VectorLike) -> bytes:
    """Serialize a sanitized vector to the float32 column format."""
    return np.asarray(vector, dtype=BLOB_DTYPE).tobytes()


def from_blob(blob: bytes, dimension: int) -> np.ndarray:
    """Deserialize a float32 column value; a wrong length means corrupt storage."""
    if blob is None or len(blob) != dimension * BLOB_DTYPE.itemsize:
        size = None if blob is None else len(blob)
        raise StorageUnavailableError(
            f"stored embedding has {size} bytes, expected {dimension * BLOB_DTYPE.itemsize}"
        )
    return np.frombuffer(blob, dtype=BLOB_DTYPE).astype(np.float32)


def distance_cosine(a: VectorLike, b: VectorLike) -> float:
    """
    Cosine distance (1 - cosine similarity) in [0, 2].

    Identical vectors are at distance 0. If either vector has zero norm the
    similarity is taken as 0, giving distance 1.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)

    if np.array_equal(a, b):
        return 0.0

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 1.0

    similarity = float(np.dot(a, b) / (norm_a * norm_b))
    return min(2.0, max(0.0, 1.0 - similarity))
