"""
Embedding generator with deterministic preprocessing.

The model is loaded lazily on first use; encoding runs in a worker thread so
the chunkers' event loop is never blocked by inference.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
from sentence_transformers import SentenceTransformer

from chunking.exceptions import ExternalCallError
from shared.circuit_breaker import CircuitOpenError, get_embedding_breaker

from .base import EmbeddingGenerator

logger = logging.getLogger(__name__)


@dataclass
class EmbeddingConfig:
    """
    Embedding model configuration.

    Changing the model changes the distance scale, and with it the
    percentile threshold chunk boundaries fall on.
    """

    model_name: str = "all-MiniLM-L6-v2"
    normalize: bool = True
    max_seq_length: int = 512
    batch_size: int = 32


class SentenceTransformerEmbeddingGenerator(EmbeddingGenerator):
    """
    Embedding generator backed by sentence-transformers.

    Usage:
        generator = SentenceTransformerEmbeddingGenerator()

        config = EmbeddingConfig(model_name="BAAI/bge-small-en-v1.5")
        generator = SentenceTransformerEmbeddingGenerator(config=config)
    """

    def __init__(
        self,
        config: Optional[EmbeddingConfig] = None,
        model: Optional[SentenceTransformer] = None,
    ):
        self.config = config or EmbeddingConfig()
        self._model = model

    @property
    def model(self) -> SentenceTransformer:
        """Lazy load the model."""
        if self._model is None:
            logger.info(f"Loading embedding model: {self.config.model_name}")
            self._model = SentenceTransformer(self.config.model_name)
        return self._model

    def preprocess_text(self, text: str) -> str:
        """Normalize whitespace and cap length; must stay stable across runs."""
        text = " ".join(text.split())
        max_chars = self.config.max_seq_length * 4  # Approximate
        if len(text) > max_chars:
            text = text[:max_chars]
        return text

    def _encode(self, texts: List[str]) -> np.ndarray:
        vectors = self.model.encode(
            texts,
            batch_size=self.config.batch_size,
            show_progress_bar=False,
            convert_to_numpy=True,
        )
        if self.config.normalize:
            norms = np.linalg.norm(vectors, axis=1, keepdims=True)
            vectors = vectors / (norms + 1e-10)  # Avoid division by zero
        return vectors

    async def embed(self, texts: Sequence[str]) -> List[List[float]]:
        if not texts:
            return []
        processed = [self.preprocess_text(t) for t in texts]
        breaker = get_embedding_breaker()
        try:
            vectors = await breaker.call_async(asyncio.to_thread, self._encode, processed)
        except CircuitOpenError:
            raise
        except Exception as e:
            logger.error(f"Embedding failed for batch of {len(texts)}: {e}")
            raise ExternalCallError("Embedding generation failed.") from e
        return vectors.tolist()


# Global embedding generator instance
_embedding_generator: Optional[SentenceTransformerEmbeddingGenerator] = None


def get_embedding_generator(
    config: Optional[EmbeddingConfig] = None,
) -> SentenceTransformerEmbeddingGenerator:
    """
    Get or create the global embedding generator.

    Args:
        config: Optional custom configuration

    Returns:
        SentenceTransformerEmbeddingGenerator instance
    """
    global _embedding_generator
    if _embedding_generator is None or config is not None:
        _embedding_generator = SentenceTransformerEmbeddingGenerator(config)
    return _embedding_generator
