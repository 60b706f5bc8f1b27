"""
Token-budget element packer.

Every boundary strategy decides *where* runs of elements start and end and
hands each run, with its context string, to the packer. The packer fills
chunks greedily up to the budget:

- elements that fit are appended whole
- oversized tables are split by rows, repeating the header row in each chunk
- other oversized text is cut with a text splitting strategy

Parts of a chunk are joined with newlines and every newline is charged
against the budget. Content is never truncated: anything that cannot fit a
fresh chunk raises ``BudgetExceededError``.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from documents import Element, Table

from .chunk import Chunk, SourceSpan
from .exceptions import BudgetExceededError, InvalidArgumentError
from .options import ChunkerOptions
from .text_splitting import DelimiterSplittingStrategy, TextSplittingStrategy

logger = logging.getLogger(__name__)

SEPARATOR = "\n"


@dataclass
class _ChunkBuffer:
    """Chunk under construction. Reset to the context after each commit."""

    context: str
    embed_context: bool
    count: Callable[[str], int]
    context_tokens: int = 0
    parts: List[str] = field(default_factory=list)
    spans: List[SourceSpan] = field(default_factory=list)
    token_count: int = 0
    last_element: Optional[Element] = None

    def __post_init__(self):
        if self.embeds_context:
            self.context_tokens = self.count(self.context)
        self.token_count = self.context_tokens

    @property
    def embeds_context(self) -> bool:
        return bool(self.embed_context and self.context)

    @property
    def has_content(self) -> bool:
        return bool(self.parts)

    def _glues(self, span: Optional[SourceSpan], continuation: bool) -> bool:
        return (
            continuation
            and self.has_content
            and span is not None
            and self.last_element is span.element
        )

    def cost(
        self, text: str, span: Optional[SourceSpan] = None, continuation: bool = False
    ) -> int:
        """Tokens ``text`` adds to this chunk, separator included."""
        if self._glues(span, continuation):
            return self.count(text)
        if self.has_content or self.embeds_context:
            return self.count(SEPARATOR + text)
        return self.count(text)

    def first_cost(self, text: str) -> int:
        """Tokens ``text`` adds as the first part of a fresh chunk."""
        if self.embeds_context:
            return self.count(SEPARATOR + text)
        return self.count(text)

    def fits(self, tokens: int, max_tokens: int) -> bool:
        return self.token_count + tokens <= max_tokens

    def append(
        self,
        text: str,
        tokens: int,
        span: Optional[SourceSpan] = None,
        continuation: bool = False,
    ):
        """Add a part; ``continuation`` glues it to the previous part."""
        if self._glues(span, continuation):
            self.parts[-1] += text
            previous = self.spans[-1]
            self.spans[-1] = SourceSpan(previous.element, previous.start, span.end)
        else:
            self.parts.append(text)
            if span is not None:
                self.spans.append(span)
        self.token_count += tokens
        self.last_element = span.element if span is not None else None

    def to_chunk(self, document_id: Optional[str]) -> Chunk:
        parts = self.parts
        if self.embeds_context:
            parts = [self.context] + parts
        content = SEPARATOR.join(parts)
        return Chunk(
            content=content,
            token_count=self.count(content),
            context=self.context or None,
            document_id=document_id,
            source_spans=tuple(self.spans),
        )

    def reset(self):
        self.parts = []
        self.spans = []
        self.token_count = self.context_tokens
        self.last_element = None


def _budget_exceeded(message: str) -> BudgetExceededError:
    return BudgetExceededError(f"{message} Consider increasing max tokens per chunk.")


class ElementPacker:
    """
    Pack a run of elements into chunks under a shared context.

    A custom splitting strategy must measure tokens the way ``options`` does:
    same tokenizer, same normalization.

    Usage:
        packer = ElementPacker(ChunkerOptions(max_tokens_per_chunk=500))
        chunks = packer.process("Intro Setup", elements, document_id="doc-1")
    """

    def __init__(
        self,
        options: ChunkerOptions,
        splitting_strategy: Optional[TextSplittingStrategy] = None,
    ):
        self.options = options
        self.splitting_strategy = splitting_strategy or DelimiterSplittingStrategy(
            options.tokenizer, normalize=options.consider_normalization
        )
        if (
            self.splitting_strategy.tokenizer is not options.tokenizer
            or self.splitting_strategy.normalize != options.consider_normalization
        ):
            raise InvalidArgumentError(
                "Splitting strategy must use the options' tokenizer and normalization."
            )

    def process(
        self,
        context: Optional[str],
        elements: Iterable[Element],
        *,
        document_id: Optional[str] = None,
        embed_context: bool = True,
    ) -> List[Chunk]:
        """
        Pack ``elements`` into chunks.

        Args:
            context: Context string (e.g. header path); may be empty
            elements: Elements of one run, in order
            document_id: Provenance pointer copied onto every chunk
            embed_context: Prefix the context to each chunk's content and
                charge its tokens against the budget

        Returns:
            Chunks in source order

        Raises:
            BudgetExceededError: If the context or an unsplittable piece
                cannot fit a fresh chunk
        """
        context = context or ""
        max_tokens = self.options.max_tokens_per_chunk
        buffer = _ChunkBuffer(context, embed_context, self.options.count_tokens)
        if buffer.embeds_context and buffer.first_cost("") + buffer.context_tokens >= max_tokens:
            logger.error(
                f"Context of {buffer.context_tokens} tokens exceeds budget of {max_tokens}"
            )
            raise _budget_exceeded("Can't fit in the current chunk.")

        chunks: List[Chunk] = []
        for element in elements:
            content = element.semantic_content
            if not content or not content.strip():
                continue

            span = SourceSpan(element, 0, len(content))
            tokens = buffer.cost(content, span)
            if buffer.fits(tokens, max_tokens):
                buffer.append(content, tokens, span)
            elif isinstance(element, Table) and len(element.cells) > 1:
                self._pack_table(element, buffer, chunks, document_id)
            else:
                self._pack_text(element, content, buffer, chunks, document_id)

        self._commit(buffer, chunks, document_id)
        logger.debug(f"Packed run into {len(chunks)} chunks (context: {context!r})")
        return chunks

    def _commit(
        self, buffer: _ChunkBuffer, chunks: List[Chunk], document_id: Optional[str]
    ):
        if buffer.has_content:
            chunk = buffer.to_chunk(document_id)
            if chunk.token_count > self.options.max_tokens_per_chunk:
                logger.error(
                    f"Chunk of {chunk.token_count} tokens exceeds budget of "
                    f"{self.options.max_tokens_per_chunk}"
                )
                raise _budget_exceeded("Chunk content does not fit the budget.")
            chunks.append(chunk)
        buffer.reset()

    def _pack_table(
        self,
        table: Table,
        buffer: _ChunkBuffer,
        chunks: List[Chunk],
        document_id: Optional[str],
    ):
        """Split a table by rows, repeating header and separator per chunk."""
        max_tokens = self.options.max_tokens_per_chunk
        header = f"{table.header_row()}{SEPARATOR}{table.separator_row()}"
        if buffer.context_tokens + buffer.first_cost(header) > max_tokens:
            logger.error(f"Table header does not fit budget of {max_tokens}")
            raise _budget_exceeded("Can't fit the table header in a chunk.")

        content = table.semantic_content
        # Rows are located after the header so a data row equal to the header
        # row maps onto itself.
        cursor = content.find(table.separator_row())
        cursor = cursor + len(table.separator_row()) if cursor >= 0 else 0

        header_open = False
        for row in table.data_rows():
            row_tokens = self.options.count_tokens(SEPARATOR + row)
            needed = row_tokens if header_open else buffer.cost(header) + row_tokens
            if not buffer.fits(needed, max_tokens):
                self._commit(buffer, chunks, document_id)
                header_open = False
                needed = buffer.cost(header) + row_tokens
                if not buffer.fits(needed, max_tokens):
                    logger.error(
                        f"Table row of {row_tokens} tokens does not fit budget of {max_tokens}"
                    )
                    raise _budget_exceeded("Can't fit a table row in a chunk.")
            if not header_open:
                buffer.append(header, buffer.cost(header))
                header_open = True

            start = content.find(row, cursor)
            if start >= 0:
                span = SourceSpan(table, start, start + len(row))
                cursor = start + len(row)
            else:
                # Reader-supplied markdown that differs from the rendered rows.
                span = SourceSpan(table, 0, len(content))
            buffer.append(row, row_tokens, span)

    def _pack_text(
        self,
        element: Element,
        content: str,
        buffer: _ChunkBuffer,
        chunks: List[Chunk],
        document_id: Optional[str],
    ):
        """Cut oversized text with the splitting strategy and pack the segments."""
        max_tokens = self.options.max_tokens_per_chunk
        budget = max_tokens - buffer.context_tokens
        if buffer.embeds_context:
            budget -= self.options.count_tokens(SEPARATOR)
        offsets = self.splitting_strategy.get_split_offsets(content, budget)

        start = 0
        continuation = False
        for end in offsets:
            segment = content[start:end]
            span = SourceSpan(element, start, end)
            start = end
            if not segment.strip():
                continue

            tokens = buffer.cost(segment, span, continuation)
            if not buffer.fits(tokens, max_tokens):
                self._commit(buffer, chunks, document_id)
                continuation = False
                tokens = buffer.cost(segment, span)
                if not buffer.fits(tokens, max_tokens):
                    logger.error(
                        f"Segment of {tokens} tokens does not fit budget of {max_tokens}"
                    )
                    raise _budget_exceeded("Can't fit in the current chunk.")
            buffer.append(segment, tokens, span, continuation=continuation)
            continuation = True
