"""
Vector encoding, similarity ranking and embedding providers.
"""

# Package initialization for vector module
from .types import EmbeddingRecord, ScoredResult, MatchQuality, StoreStats
from .index import SimilarityIndex, classify_match_quality, similarity_percent
from .embeddings import IEmbeddingProvider, DeterministicHashEmbedding, SineTestEmbedding, SentenceTransformerEmbedding

__all__ = [
    'EmbeddingRecord',
    'ScoredResult',
    'MatchQuality',
    'StoreStats',
    'SimilarityIndex',
    'classify_match_quality',
    'similarity_percent',
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'SineTestEmbedding',
    'SentenceTransformerEmbedding'
]
