"""
Tests for vector validation, encoding and cosine distance.
"""

import math

import numpy as np
import pytest

from semstore.core.errors import (
    DimensionMismatchError,
    ErrorKind,
    InvalidInputError,
    StorageUnavailableError,
)
from semstore.vector import codec


def test_validate_returns_float32_copy():
    """Validation returns a float32 copy and leaves the input untouched."""
    original = np.array([1.0, 2.0, 3.0, 4.0], dtype=np.float64)
    result = codec.validate(original, 4)

    assert result.dtype == np.float32
    assert result.tolist() == [1.0, 2.0, 3.0, 4.0]

    result[0] = 99.0
    assert original[0] == 1.0


def test_validate_accepts_plain_lists():
    result = codec.validate([0.5, -0.5], 2)
    assert result.tolist() == [0.5, -0.5]


def test_validate_replaces_non_finite_values():
    """NaN and infinities are stored as 0.0."""
    result = codec.validate([math.nan, 1.0, math.inf, -math.inf], 4)
    assert result.tolist() == [0.0, 1.0, 0.0, 0.0]


def test_validate_replaces_float32_overflow():
    """Values too large for float32 would become inf, so they are repaired too."""
    result, repaired = codec.validate_with_count([1e39, 1.0], 2)
    assert result.tolist() == [0.0, 1.0]
    assert repaired == 1


def test_validate_counts_repairs():
    _, repaired = codec.validate_with_count([math.nan, 1.0, 0.0, math.nan], 4)
    assert repaired == 2


def test_validate_rejects_wrong_length():
    with pytest.raises(DimensionMismatchError) as exc_info:
        codec.validate([1.0, 2.0, 3.0], 4)

    assert exc_info.value.kind == ErrorKind.DIMENSION_MISMATCH
    assert exc_info.value.expected == 4
    assert exc_info.value.actual == 3


def test_validate_rejects_matrices():
    with pytest.raises(DimensionMismatchError):
        codec.validate(np.zeros((2, 2)), 4)


def test_validate_rejects_non_numeric():
    with pytest.raises(InvalidInputError):
        codec.validate(["a", "b"], 2)


def test_validate_rejects_none():
    with pytest.raises(InvalidInputError):
        codec.validate(None, 2)


def test_encode_literal_format():
    assert codec.encode([0.1, 1.0, -0.0, 0.5]) == "[0.1, 1, 0, 0.5]"


def test_encode_is_stable():
    """Encoding the same sanitized vector always gives identical text."""
    vector = codec.validate(np.random.default_rng(7).normal(size=32), 32)
    first = codec.encode(vector)
    second = codec.encode(vector.copy())
    assert first == second


def test_decode_reverses_encode():
    vector = codec.validate(np.random.default_rng(3).normal(size=16), 16)
    decoded = codec.decode(codec.encode(vector), 16)
    assert np.array_equal(decoded, vector)


def test_decode_empty_literal():
    assert codec.decode("[]").tolist() == []


def test_decode_rejects_garbage():
    with pytest.raises(InvalidInputError):
        codec.decode("1, 2, 3")
    with pytest.raises(InvalidInputError):
        codec.decode("[1, two]")


def test_decode_checks_dimension():
    with pytest.raises(DimensionMismatchError):
        codec.decode("[1, 2, 3]", 4)


def test_blob_round_trip_is_exact():
    vector = codec.validate([0.1, -2.5, 3.75, 1e-7], 4)
    blob = codec.to_blob(vector)

    assert len(blob) == 16
    assert np.array_equal(codec.from_blob(blob, 4), vector)


def test_from_blob_rejects_wrong_length():
    with pytest.raises(StorageUnavailableError):
        codec.from_blob(b"\x00" * 12, 4)


def test_distance_identical_vectors_is_zero():
    assert codec.distance_cosine([0.3, 0.4, 0.5], [0.3, 0.4, 0.5]) == 0.0


def test_distance_orthogonal_and_opposite():
    assert codec.distance_cosine([1.0, 0.0], [0.0, 1.0]) == pytest.approx(1.0)
    assert codec.distance_cosine([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(2.0)


def test_distance_ignores_magnitude():
    assert codec.distance_cosine([1.0, 2.0], [2.0, 4.0]) == pytest.approx(0.0, abs=1e-12)


def test_distance_zero_vector_is_defined():
    """An all-zero vector has similarity 0 to anything else, not a crash."""
    assert codec.distance_cosine([0.0, 0.0], [1.0, 0.0]) == 1.0
    assert codec.distance_cosine([1.0, 0.0], [0.0, 0.0]) == 1.0


def test_distance_two_zero_vectors_are_equal():
    assert codec.distance_cosine([0.0, 0.0], [0.0, 0.0]) == 0.0


def test_distance_stays_in_range():
    rng = np.random.default_rng(11)
    for _ in range(50):
        a = rng.normal(size=8)
        b = rng.normal(size=8)
        assert 0.0 <= codec.distance_cosine(a, b) <= 2.0


def test_negative_zero_decodes_as_zero():
    decoded = codec.decode(codec.encode([-0.0, 1.0]), 2)

    assert decoded.tolist() == [0.0, 1.0]
    assert not np.signbit(decoded[0])
