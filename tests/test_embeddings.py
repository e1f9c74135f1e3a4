"""
Tests for the embedding providers.
"""

import math
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from semstore.vector.embeddings import (
    DeterministicHashEmbedding,
    IEmbeddingProvider,
    SentenceTransformerEmbedding,
    SineTestEmbedding,
)


def test_embedding_interface():
    """Test that the embedding providers implement the interface correctly."""
    embedder = DeterministicHashEmbedding(dimension=512)

    assert isinstance(embedder, IEmbeddingProvider)
    assert isinstance(SineTestEmbedding(), IEmbeddingProvider)
    assert embedder.get_dimension() == 512


def test_deterministic_embedding():
    """Test that the same input always produces the same output."""
    embedder = DeterministicHashEmbedding(dimension=512)

    vector1 = embedder.embed_text("Hello, world!")
    vector2 = embedder.embed_text("Hello, world!")

    assert vector1 == vector2
    assert len(vector1) == 512


def test_hash_embedding_fills_every_component():
    vector = DeterministicHashEmbedding(dimension=100).embed_text("fill me")

    assert len(vector) == 100
    assert all(v != 0.0 for v in vector)


def test_hash_embedding_is_normalised():
    vector = DeterministicHashEmbedding(dimension=64).embed_text("unit length")
    assert math.sqrt(sum(v * v for v in vector)) == pytest.approx(1.0)


def test_different_inputs_produce_different_vectors():
    embedder = DeterministicHashEmbedding(dimension=512)

    assert embedder.embed_text("Hello, world!") != embedder.embed_text("Goodbye, world!")


def test_consistent_output_across_instances():
    text = "This is a test string"
    assert DeterministicHashEmbedding(64).embed_text(text) == DeterministicHashEmbedding(64).embed_text(text)


def test_embed_batch_preserves_order():
    embedder = DeterministicHashEmbedding(dimension=32)
    texts = ["one", "two", "three"]

    vectors = embedder.embed(texts)

    assert len(vectors) == 3
    assert vectors == [embedder.embed_text(t) for t in texts]


def test_embedding_edge_cases():
    embedder = DeterministicHashEmbedding(dimension=384)
    assert len(embedder.embed_text("")) == 384


def test_sine_embedding_formula():
    vector = SineTestEmbedding(dimension=8).embed_text("abc")
    assert vector == [math.sin(i * 3) * 0.5 for i in range(8)]


def test_sine_embedding_equal_length_texts_collide():
    embedder = SineTestEmbedding(dimension=16)
    assert embedder.embed_text("cat") == embedder.embed_text("dog")


def test_sentence_transformer_lazy_load():
    """The model is not loaded until first use."""
    provider = SentenceTransformerEmbedding("some-model")
    assert provider._model is None


def test_sentence_transformer_batch_embed():
    provider = SentenceTransformerEmbedding("some-model")
    fake_model = MagicMock()
    fake_model.encode.return_value = np.array([[0.1, 0.2], [0.3, 0.4]])
    provider._model = fake_model

    vectors = provider.embed(["a", "b"])

    assert vectors == [[0.1, 0.2], [0.3, 0.4]]
    fake_model.encode.assert_called_once_with(["a", "b"], convert_to_tensor=False)


def test_sentence_transformer_dimension():
    provider = SentenceTransformerEmbedding("some-model")
    fake_model = MagicMock()
    fake_model.encode.return_value = np.zeros(512)
    provider._model = fake_model

    assert provider.get_dimension() == 512


def test_sentence_transformer_missing_dependency():
    provider = SentenceTransformerEmbedding("some-model")

    with patch.dict("sys.modules", {"sentence_transformers": None}):
        with pytest.raises(ImportError):
            provider.embed_text("hello")
