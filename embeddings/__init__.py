"""
Embedding generation for embedding-distance chunking.

Vectors from different models must never be compared: the semantic
chunker embeds all elements of a document in one batch with one model.

Usage:
    from embeddings import SentenceTransformerEmbeddingGenerator

    generator = SentenceTransformerEmbeddingGenerator()
    vectors = await generator.embed(["first paragraph", "second paragraph"])
"""

from .base import EmbeddingGenerator
from .embedder import (
    EmbeddingConfig,
    SentenceTransformerEmbeddingGenerator,
    get_embedding_generator,
)

__all__ = [
    "EmbeddingGenerator",
    "EmbeddingConfig",
    "SentenceTransformerEmbeddingGenerator",
    "get_embedding_generator",
]
