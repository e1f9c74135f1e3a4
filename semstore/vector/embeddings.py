"""
Embedding providers.

The store never computes embeddings itself; these providers stand in for the
embedding model collaborator. Whatever they return is still validated by the
store before it is persisted or searched.
"""

from abc import ABC, abstractmethod
import hashlib
import math
from typing import List, Sequence

import numpy as np


class IEmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    @abstractmethod
    def embed_text(self, text: str) -> list[float]:
        """Generate embedding vector for given text."""
        pass

    @abstractmethod
    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        pass

    def embed(self, texts: Sequence[str]) -> List[list[float]]:
        """Embed several texts; one vector per input, same order."""
        return [self.embed_text(text) for text in texts]


class DeterministicHashEmbedding(IEmbeddingProvider):
    """Deterministic hash-based embedding provider for testing purposes.

    SHA-256 is run in counter mode over the text until every component is
    filled, then the vector is L2-normalised. The same text always maps to
    the same vector, across processes and runs.
    """

    def __init__(self, dimension: int = 512):
        self.dimension = dimension

    def embed_text(self, text: str) -> list[float]:
        """Generate deterministic embedding vector using hash function."""
        vector = []
        counter = 0
        while len(vector) < self.dimension:
            digest = hashlib.sha256(f"{counter}:{text}".encode()).digest()
            for i in range(0, len(digest), 4):
                if len(vector) >= self.dimension:
                    break
                value = int.from_bytes(digest[i:i + 4], "big")
                # Map to [-1, 1] for cosine similarity
                vector.append((value / (2**32)) * 2 - 1)
            counter += 1

        norm = math.sqrt(sum(v * v for v in vector))
        if norm > 0:
            vector = [v / norm for v in vector]
        return vector

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        return self.dimension


class SineTestEmbedding(IEmbeddingProvider):
    """Fixture embeddings: component i is sin(i * len(text)) * 0.5.

    Texts of equal length get identical vectors, which makes seeded demo
    searches easy to predict.
    """

    def __init__(self, dimension: int = 512):
        self.dimension = dimension

    def embed_text(self, text: str) -> list[float]:
        length = len(text)
        return [math.sin(i * length) * 0.5 for i in range(self.dimension)]

    def get_dimension(self) -> int:
        return self.dimension


class SentenceTransformerEmbedding(IEmbeddingProvider):
    """Sentence transformers embedding provider using pre-trained models.

    The default model produces 512-dimensional embeddings. The model is
    loaded on first use.
    """

    def __init__(self, model_name: str = "distiluse-base-multilingual-cased-v2"):
        self.model_name = model_name
        self._model = None
        self._dimension = None

    @property
    def model(self):
        if self._model is None:
            try:
                from sentence_transformers import SentenceTransformer
            except ImportError:
                raise ImportError(
                    "sentence-transformers not installed. Install the 'models' extra."
                )
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def embed_text(self, text: str) -> list[float]:
        """Generate embedding vector using sentence transformers."""
        embedding = self.model.encode(text, convert_to_tensor=False)
        return embedding.tolist()

    def embed(self, texts: Sequence[str]) -> List[list[float]]:
        """Batch-encode texts in a single model call."""
        if not texts:
            return []
        embeddings = self.model.encode(list(texts), convert_to_tensor=False)
        return np.asarray(embeddings).tolist()

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        if self._dimension is None:
            # Get dimension by encoding a dummy string
            dummy_embedding = self.model.encode("test", convert_to_tensor=False)
            self._dimension = len(dummy_embedding)
        return self._dimension
