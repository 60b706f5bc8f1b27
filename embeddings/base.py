"""Embedding generator interface."""

from abc import ABC, abstractmethod
from typing import List, Sequence


class EmbeddingGenerator(ABC):
    """Batch text embedding."""

    @abstractmethod
    async def embed(self, texts: Sequence[str]) -> List[List[float]]:
        """Return one vector per input text, in order."""
