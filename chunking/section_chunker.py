"""Chunking along the document's section tree."""

import logging
from typing import List

from documents import Document, Element, Header, Section

from .base import DocumentChunker
from .chunk import Chunk

logger = logging.getLogger(__name__)


class SectionChunker(DocumentChunker):
    """
    Each section is its own run. A section opening with a header extends the
    inherited context with that header's text.
    """

    async def _chunk(self, document: Document) -> List[Chunk]:
        chunks: List[Chunk] = []
        for section in document.sections:
            await self._process_section(document, section, "", chunks)
        return chunks

    async def _process_section(
        self, document: Document, section: Section, context: str, chunks: List[Chunk]
    ):
        run: List[Element] = []
        for index, element in enumerate(section.elements):
            if index == 0 and isinstance(element, Header):
                context = " ".join(c for c in (context, element.text) if c)
            elif isinstance(element, Section):
                chunks.extend(await self._pack_run(document, context, run))
                run = []
                await self._process_section(document, element, context, chunks)
            else:
                run.append(element)
        chunks.extend(await self._pack_run(document, context, run))
