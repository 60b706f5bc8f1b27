"""
Recursive markdown-header chunking.

Headers up to ``header_level_to_split_on`` cut the stream; deeper headers
stay in the body. The context of a run is the chain of enclosing header
lines joined with ``;``.
"""

import logging
from typing import List, Optional

from documents import Document, Element, Header

from .base import DocumentChunker
from .chunk import Chunk
from .exceptions import InvalidArgumentError
from .options import ChunkerOptions
from .text_splitting import TextSplittingStrategy

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = ";"


class MarkdownChunker(DocumentChunker):
    """
    Usage:
        chunker = MarkdownChunker(options, header_level_to_split_on=2)
        chunks = await chunker.process(document)

    With ``strip_headers=True`` (default) the header context is kept only as
    chunk metadata; otherwise it is written at the top of each chunk.
    """

    def __init__(
        self,
        options: Optional[ChunkerOptions] = None,
        header_level_to_split_on: int = 3,
        strip_headers: bool = True,
        splitting_strategy: Optional[TextSplittingStrategy] = None,
    ):
        if header_level_to_split_on < 1:
            raise InvalidArgumentError(
                f"Header level to split on must be positive, got {header_level_to_split_on}."
            )
        super().__init__(options, splitting_strategy)
        self.header_level_to_split_on = header_level_to_split_on
        self.strip_headers = strip_headers

    async def _chunk(self, document: Document) -> List[Chunk]:
        stack = list(document)
        stack.reverse()
        chunks: List[Chunk] = []
        await self._parse_level(document, stack, 1, None, None, chunks)
        return chunks

    def _header_level(self, element: Element) -> int:
        if isinstance(element, Header) and element.level:
            if element.level < 0:
                raise InvalidArgumentError(
                    f"Header level must not be negative, got {element.level}."
                )
            if element.level <= self.header_level_to_split_on:
                return element.level
        return 0

    async def _parse_level(
        self,
        document: Document,
        stack: List[Element],
        level: int,
        context: Optional[str],
        last_header: Optional[Header],
        chunks: List[Chunk],
    ):
        run: List[Element] = []
        while stack:
            element = stack.pop()
            header_level = self._header_level(element)
            if header_level == 0:
                run.append(element)
                continue

            await self._commit(document, run, context, last_header, chunks)
            run = []
            if header_level == level:
                last_header = element
            elif header_level < level:
                stack.append(element)
                return
            else:
                await self._parse_level(
                    document,
                    stack,
                    level + 1,
                    self._join(context, last_header),
                    element,
                    chunks,
                )
        await self._commit(document, run, context, last_header, chunks)

    @staticmethod
    def _join(context: Optional[str], header: Optional[Header]) -> Optional[str]:
        parts = [p for p in (context, header.markdown if header else None) if p]
        return CONTEXT_SEPARATOR.join(parts) or None

    async def _commit(
        self,
        document: Document,
        run: List[Element],
        context: Optional[str],
        last_header: Optional[Header],
        chunks: List[Chunk],
    ):
        if not any(e.semantic_content.strip() for e in run):
            return
        chunks.extend(
            await self._pack_run(
                document,
                self._join(context, last_header),
                run,
                embed_context=not self.strip_headers,
            )
        )
