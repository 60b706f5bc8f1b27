"""Chunking by header hierarchy over the flattened element stream."""

import logging
from typing import List, Optional

from documents import Document, Element, Header

from .base import DocumentChunker
from .chunk import Chunk
from .exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

MAX_HEADER_LEVEL = 10


class HeaderChunker(DocumentChunker):
    """
    Start a new run at every header; context is the current header path.

    Usage:
        chunker = HeaderChunker(ChunkerOptions(max_tokens_per_chunk=500))
        chunks = await chunker.process(document)
    """

    async def _chunk(self, document: Document) -> List[Chunk]:
        headers: List[Optional[str]] = [None] * (MAX_HEADER_LEVEL + 1)
        run: List[Element] = []
        chunks: List[Chunk] = []

        for element in document:
            if not isinstance(element, Header):
                run.append(element)
                continue

            chunks.extend(await self._pack_run(document, self._context(headers), run))
            run = []

            level = element.level or 0
            if not 0 <= level <= MAX_HEADER_LEVEL:
                raise InvalidArgumentError(
                    f"Header level {level} is outside 0..{MAX_HEADER_LEVEL}."
                )
            for deeper in range(level, MAX_HEADER_LEVEL + 1):
                headers[deeper] = None
            headers[level] = element.text

        chunks.extend(await self._pack_run(document, self._context(headers), run))
        return chunks

    @staticmethod
    def _context(headers: List[Optional[str]]) -> str:
        return " ".join(h for h in headers if h)
