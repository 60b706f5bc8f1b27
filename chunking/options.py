"""Chunker options with validation on every mutation."""

from typing import Optional

from tokenization import Tokenizer, get_default_tokenizer

from .exceptions import InvalidArgumentError

DEFAULT_MAX_TOKENS_PER_CHUNK = 2000
DEFAULT_OVERLAP_TOKENS = 500


class ChunkerOptions:
    """
    Token budget and tokenizer settings shared by all chunkers.

    Invariant: ``max_tokens_per_chunk > 0`` and
    ``0 <= overlap_tokens < max_tokens_per_chunk`` at all times.

    Usage:
        options = ChunkerOptions(max_tokens_per_chunk=500, overlap_tokens=50)
        options.max_tokens_per_chunk = 0   # raises InvalidArgumentError
    """

    def __init__(
        self,
        tokenizer: Optional[Tokenizer] = None,
        max_tokens_per_chunk: int = DEFAULT_MAX_TOKENS_PER_CHUNK,
        overlap_tokens: Optional[int] = None,
        consider_pre_tokenization: bool = True,
        consider_normalization: bool = True,
    ):
        self.tokenizer = tokenizer or get_default_tokenizer()
        self._overlap_tokens = 0
        self.max_tokens_per_chunk = max_tokens_per_chunk
        if overlap_tokens is None:
            # Default overlap shrinks to 0 for budgets it would not fit.
            overlap_tokens = (
                DEFAULT_OVERLAP_TOKENS
                if DEFAULT_OVERLAP_TOKENS < max_tokens_per_chunk
                else 0
            )
        self.overlap_tokens = overlap_tokens
        self.consider_pre_tokenization = consider_pre_tokenization
        self.consider_normalization = consider_normalization

    @property
    def max_tokens_per_chunk(self) -> int:
        return self._max_tokens_per_chunk

    @max_tokens_per_chunk.setter
    def max_tokens_per_chunk(self, value: int):
        if value <= 0:
            raise InvalidArgumentError(
                f"Max tokens per chunk must be positive, got {value}."
            )
        if self._overlap_tokens >= value:
            raise InvalidArgumentError("Chunk overlap must be less than chunk size.")
        self._max_tokens_per_chunk = value

    @property
    def overlap_tokens(self) -> int:
        return self._overlap_tokens

    @overlap_tokens.setter
    def overlap_tokens(self, value: int):
        if value < 0:
            raise InvalidArgumentError(
                f"Chunk overlap must not be negative, got {value}."
            )
        if value >= self._max_tokens_per_chunk:
            raise InvalidArgumentError("Chunk overlap must be less than chunk size.")
        self._overlap_tokens = value

    def count_tokens(self, text: str) -> int:
        """Count tokens honoring the normalization and pre-tokenization flags."""
        return self.tokenizer.count_tokens(
            text,
            normalize=self.consider_normalization,
            pre_tokenize=self.consider_pre_tokenization,
        )

    @classmethod
    def from_config(cls, config, tokenizer: Optional[Tokenizer] = None) -> "ChunkerOptions":
        """Build options from a ``shared.config.ChunkingConfig``."""
        return cls(
            tokenizer=tokenizer,
            max_tokens_per_chunk=config.max_tokens,
            overlap_tokens=config.overlap_tokens,
            consider_pre_tokenization=config.consider_pre_tokenization,
            consider_normalization=config.consider_normalization,
        )

    def __repr__(self) -> str:
        return (
            f"ChunkerOptions(max_tokens_per_chunk={self.max_tokens_per_chunk}, "
            f"overlap_tokens={self.overlap_tokens})"
        )
