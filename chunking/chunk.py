"""Chunk output type."""

from dataclasses import dataclass
from typing import Optional, Tuple

from documents import Element


@dataclass(frozen=True)
class SourceSpan:
    """Character range ``[start, end)`` into an element's semantic content."""

    element: Element
    start: int
    end: int


@dataclass(frozen=True)
class Chunk:
    """
    A token-bounded piece of a document.

    ``context`` holds the structural context (header path) the chunk was
    produced under, whether or not it is also embedded in ``content``.
    """

    content: str
    token_count: Optional[int] = None
    context: Optional[str] = None
    document_id: Optional[str] = None
    source_spans: Tuple[SourceSpan, ...] = ()

    def __post_init__(self):
        if not self.content or not self.content.strip():
            raise ValueError("Chunk content must not be empty or whitespace.")
        if self.token_count is not None and self.token_count <= 0:
            raise ValueError(
                f"Chunk token count must be positive, got {self.token_count}."
            )
