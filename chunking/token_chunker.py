"""Plain token-window chunking with overlap."""

import logging
from typing import List

from documents import Document

from .base import DocumentChunker
from .chunk import Chunk

logger = logging.getLogger(__name__)


class DocumentTokenChunker(DocumentChunker):
    """
    Slide a window of ``max_tokens_per_chunk`` tokens over the document
    markdown, advancing by ``max_tokens_per_chunk - overlap_tokens``.

    Ignores document structure; useful as a baseline.
    """

    async def _chunk(self, document: Document) -> List[Chunk]:
        tokenizer = self.options.tokenizer
        size = self.options.max_tokens_per_chunk
        step = size - self.options.overlap_tokens

        token_ids = tokenizer.encode(document.to_markdown())
        chunks: List[Chunk] = []
        for start in range(0, len(token_ids), step):
            window = token_ids[start : start + size]
            content = tokenizer.decode(window)
            if content.strip():
                chunks.append(
                    Chunk(
                        content=content,
                        token_count=len(window),
                        document_id=document.identifier,
                    )
                )
            if start + size >= len(token_ids):
                break
        return chunks
