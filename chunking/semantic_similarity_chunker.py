"""
Embedding-distance chunking.

Consecutive elements whose embeddings drift apart more than the chosen
percentile of all consecutive distances mark a topic change.
"""

import logging
import math
from typing import List, Optional

from documents import Document, Element
from embeddings.base import EmbeddingGenerator

from .base import DocumentChunker
from .chunk import Chunk
from .exceptions import InvalidArgumentError
from .math_kernels import cosine_similarity, percentile
from .options import ChunkerOptions
from .text_splitting import TextSplittingStrategy

logger = logging.getLogger(__name__)


class SemanticSimilarityChunker(DocumentChunker):
    """
    Split where cosine distance between neighbours exceeds a percentile.

    Usage:
        chunker = SemanticSimilarityChunker(
            SentenceTransformerEmbeddingGenerator(), options, threshold_percentile=90
        )
        chunks = await chunker.process(document)
    """

    def __init__(
        self,
        embedding_generator: EmbeddingGenerator,
        options: Optional[ChunkerOptions] = None,
        threshold_percentile: float = 95.0,
        splitting_strategy: Optional[TextSplittingStrategy] = None,
    ):
        if not 0.0 <= threshold_percentile <= 100.0:
            raise InvalidArgumentError(
                f"Threshold percentile must be between 0 and 100, got {threshold_percentile}."
            )
        super().__init__(options, splitting_strategy)
        self.embedding_generator = embedding_generator
        self.threshold_percentile = threshold_percentile

    async def _chunk(self, document: Document) -> List[Chunk]:
        elements: List[Element] = [
            e for e in document if e.semantic_content.strip()
        ]
        if not elements:
            return []

        embeddings = await self.embedding_generator.embed(
            [e.semantic_content for e in elements]
        )
        distances = self._distances(embeddings)
        threshold = percentile(distances, self.threshold_percentile / 100.0)
        logger.debug(
            f"Semantic threshold {threshold:.4f} at p{self.threshold_percentile} "
            f"over {len(distances)} distances"
        )

        chunks: List[Chunk] = []
        run: List[Element] = []
        for element, distance in zip(elements, distances):
            run.append(element)
            if distance > threshold:
                chunks.extend(await self._pack_run(document, "", run))
                run = []
        chunks.extend(await self._pack_run(document, "", run))
        return chunks

    @staticmethod
    def _distances(embeddings: List[List[float]]) -> List[float]:
        """Distance from each element to the next; the last element gets 0."""
        distances = []
        for current, following in zip(embeddings, embeddings[1:]):
            similarity = cosine_similarity(current, following)
            if math.isnan(similarity):
                similarity = 0.0
            distances.append(1.0 - similarity)
        distances.append(0.0)
        return distances
