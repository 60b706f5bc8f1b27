"""Base class for document-level chunking strategies."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from documents import Document, Element

from .chunk import Chunk
from .element_packer import ElementPacker
from .exceptions import InvalidArgumentError
from .options import ChunkerOptions
from .text_splitting import TextSplittingStrategy

logger = logging.getLogger(__name__)


class DocumentChunker(ABC):
    """
    A boundary strategy: decides where runs start and end, then packs each
    run with the element packer.

    ``process`` is a coroutine. Cancelling the awaiting task abandons the
    document at the next run boundary without emitting partial results.
    """

    def __init__(
        self,
        options: Optional[ChunkerOptions] = None,
        splitting_strategy: Optional[TextSplittingStrategy] = None,
    ):
        self.options = options or ChunkerOptions()
        self.packer = ElementPacker(self.options, splitting_strategy)

    async def process(self, document: Document) -> List[Chunk]:
        if document is None:
            raise InvalidArgumentError("Document must not be None.")
        chunks = await self._chunk(document)
        logger.info(
            f"{type(self).__name__} produced {len(chunks)} chunks "
            f"for document {document.identifier!r}"
        )
        return chunks

    @abstractmethod
    async def _chunk(self, document: Document) -> List[Chunk]:
        ...

    async def _pack_run(
        self,
        document: Document,
        context: Optional[str],
        elements: Sequence[Element],
        embed_context: bool = True,
    ) -> List[Chunk]:
        """Cancellation checkpoint, then pack one run."""
        await asyncio.sleep(0)
        if not elements:
            return []
        return self.packer.process(
            context,
            elements,
            document_id=document.identifier,
            embed_context=embed_context,
        )
