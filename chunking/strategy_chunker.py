"""Chunking the whole document text with a text splitting strategy."""

import logging
from typing import List, Optional

from documents import Document

from .base import DocumentChunker
from .chunk import Chunk
from .exceptions import BudgetExceededError
from .options import ChunkerOptions
from .text_splitting import TextSplittingStrategy

logger = logging.getLogger(__name__)


class StrategyChunker(DocumentChunker):
    """
    Render the document to markdown and cut it with ``strategy``.

    Without explicit options the budget is measured the way the strategy
    measures it. Explicit options must agree with the strategy's tokenizer
    and normalization.

    Usage:
        chunker = StrategyChunker(SlidingWindowNeuralSplittingStrategy.from_pretrained(...))
        chunks = await chunker.process(document)
    """

    def __init__(
        self, strategy: TextSplittingStrategy, options: Optional[ChunkerOptions] = None
    ):
        if options is None:
            options = ChunkerOptions(
                tokenizer=strategy.tokenizer,
                consider_normalization=strategy.normalize,
            )
        super().__init__(options, strategy)
        self.strategy = strategy

    async def _chunk(self, document: Document) -> List[Chunk]:
        max_tokens = self.options.max_tokens_per_chunk
        text = document.to_markdown()
        offsets = self.strategy.get_split_offsets(text, max_tokens)

        chunks: List[Chunk] = []
        start = 0
        for end in offsets:
            segment = text[start:end]
            start = end
            if not segment.strip():
                continue
            tokens = self.options.count_tokens(segment)
            if tokens > max_tokens:
                logger.error(
                    f"Segment of {tokens} tokens at offset {end - len(segment)} "
                    f"exceeds budget of {max_tokens}"
                )
                raise BudgetExceededError(
                    "Splitting strategy produced a segment over the budget. "
                    "Consider increasing max tokens per chunk."
                )
            chunks.append(
                Chunk(
                    content=segment,
                    token_count=tokens or None,
                    document_id=document.identifier,
                )
            )
        return chunks
