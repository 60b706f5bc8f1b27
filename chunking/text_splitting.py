"""
Text splitting strategies used when one element outgrows the budget.

A strategy returns ascending character end offsets. Segment ``k`` is
``text[offsets[k - 1]:offsets[k]]`` (the first starts at 0) and the last
offset equals ``len(text)``.
"""

import logging
from abc import ABC, abstractmethod
from typing import List

from tokenization import Tokenizer

from .exceptions import BudgetExceededError, InvalidArgumentError

logger = logging.getLogger(__name__)


class TextSplittingStrategy(ABC):
    """
    Cuts a piece of text into segments of at most N tokens.

    The budget is measured with ``tokenizer``, after NFKC normalization when
    ``normalize`` is set. ``count_tokens`` measures a segment the same way.
    """

    tokenizer: Tokenizer
    normalize: bool = False

    def count_tokens(self, text: str) -> int:
        return self.tokenizer.count_tokens(text, normalize=self.normalize)

    @abstractmethod
    def get_split_offsets(self, text: str, max_token_count: int) -> List[int]:
        """
        Args:
            text: Text to split
            max_token_count: Token budget per segment

        Returns:
            Ascending end offsets, last one equal to ``len(text)``;
            empty list for empty text
        """


class DelimiterSplittingStrategy(TextSplittingStrategy):
    """
    Fill each segment up to the budget, then back off to the last delimiter.

    Usage:
        strategy = DelimiterSplittingStrategy(tokenizer, normalize=True)
        offsets = strategy.get_split_offsets(text, 200)
    """

    def __init__(self, tokenizer: Tokenizer, delimiter: str = "\n", normalize: bool = False):
        if not delimiter:
            raise InvalidArgumentError("Delimiter must not be empty.")
        self.tokenizer = tokenizer
        self.delimiter = delimiter
        self.normalize = normalize

    def get_split_offsets(self, text: str, max_token_count: int) -> List[int]:
        if not text:
            return []
        if max_token_count <= 0:
            raise InvalidArgumentError(
                f"Max token count must be positive, got {max_token_count}."
            )

        offsets = []
        position = 0
        while position < len(text):
            remaining = text[position:]
            index, _ = self.tokenizer.get_index_by_token_count(
                remaining, max_token_count, normalize=self.normalize
            )
            if index == 0:
                logger.error(
                    f"No token fits a budget of {max_token_count} at offset {position}"
                )
                raise BudgetExceededError(
                    "Can't fit any token of the text in a chunk. "
                    "Consider increasing max tokens per chunk."
                )

            if index < len(remaining):
                cut = remaining.rfind(self.delimiter, 0, index)
                if cut > 0:
                    index = cut + len(self.delimiter)

            position += index
            offsets.append(position)
        return offsets
