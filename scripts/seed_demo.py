#!/usr/bin/env python3
"""
Seed-and-query demonstration.

Opens a fresh store, seeds it with sample sentences embedded by the
configured provider and prints the ranked matches for a query.
"""

import argparse
import sys
from pathlib import Path

# Allow running from a source checkout without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

from semstore.core import config
from semstore.core.errors import StoreError
from semstore.core.store import EmbeddingStore

SAMPLE_TEXTS = [
    "The quick brown fox jumps over the lazy dog",
    "Machine learning is a subset of artificial intelligence that focuses on data and algorithms",
    "A beautiful sunset painted the sky in shades of orange and purple",
    "The recipe calls for fresh basil, garlic, and extra virgin olive oil",
    "Scientists discovered a new species of deep-sea creature near hydrothermal vents",
    "The ancient ruins revealed secrets about a long-lost civilization",
    "Electric vehicles are becoming increasingly popular as technology improves",
    "The jazz musician improvised a mesmerizing solo on his saxophone",
    "Climate change is affecting weather patterns around the globe",
    "The art exhibition featured works from emerging local artists",
    "Quantum computers could revolutionize cryptography and drug discovery",
    "The chef's signature dish combines traditional and modern cooking techniques",
    "Space exploration has led to numerous technological advancements",
    "The novel tells a compelling story about friendship and redemption",
    "Regular exercise and proper nutrition are essential for good health",
]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Seed a semantic store and run a test search")
    parser.add_argument("query", help="Text to search for")
    parser.add_argument("--db-path", default=config.DB_PATH, help="SQLite database path")
    parser.add_argument("--dimension", type=int, default=config.EMBED_DIM, help="Embedding dimension")
    parser.add_argument("-k", "--top-k", type=int, default=5, help="Number of results")
    parser.add_argument("--min-similarity", type=float, default=None,
                        help="Drop results below this similarity fraction (0-1)")
    return parser.parse_args(argv)


def print_results(query, results):
    print(f'\nTesting similarity search for: "{query}"')
    print("\nSearch Results:")
    for position, result in enumerate(results, start=1):
        print(f'\n{position}. Content: "{result.content}"')
        print(f"   Similarity: {result.similarity_percent}%")
        print(f"   Match Quality: {result.match_quality.value}")


def main(argv=None):
    """Seed the store and print the search results for the query."""
    args = parse_args(argv)
    provider = config.get_embedding_provider(args.dimension)

    store = EmbeddingStore(db_path=args.db_path, dimension=args.dimension,
                           embedding_provider=provider)
    store.subscribe(lambda message: print(f"[status] {message}"))

    try:
        store.open()
        print("Starting to populate test data...")
        store.store_texts(SAMPLE_TEXTS)
        print(f"✓ Stored {store.count()} records")

        results = store.search_text(args.query, k=args.top_k, min_similarity=args.min_similarity)
        print_results(args.query, results)
    except StoreError as e:
        print(f"ERROR: {e}")
        return 1
    finally:
        store.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
