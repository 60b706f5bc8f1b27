"""Tokenizer interface shared by the chunking engine."""

import unicodedata
from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

Span = Tuple[int, int]


class Tokenizer(ABC):
    """
    Minimal tokenizer contract.

    Implementations provide ids and per-token character spans; counting and
    budget cutting are derived from those.
    """

    @abstractmethod
    def encode(self, text: str) -> List[int]:
        ...

    @abstractmethod
    def decode(self, ids: Sequence[int]) -> str:
        ...

    @abstractmethod
    def encode_with_offsets(self, text: str) -> Tuple[List[int], List[Span]]:
        """Return token ids and the ``(start, end)`` character span of each."""

    @staticmethod
    def normalize(text: str) -> str:
        return unicodedata.normalize("NFKC", text)

    def count_tokens(
        self, text: str, normalize: bool = False, pre_tokenize: bool = True
    ) -> int:
        """
        Count tokens in ``text``.

        Args:
            text: Text to measure
            normalize: Apply NFKC normalization before counting
            pre_tokenize: Honored by backends with a pre-tokenizer toggle

        Returns:
            Number of tokens
        """
        if not text:
            return 0
        if normalize:
            text = self.normalize(text)
        return len(self.encode(text))

    def get_index_by_token_count(
        self, text: str, max_token_count: int, normalize: bool = False
    ) -> Tuple[int, int]:
        """
        Find the longest prefix made of whole tokens within the budget.

        Args:
            text: Text to cut
            max_token_count: Token budget for the prefix
            normalize: Measure the prefix after NFKC normalization, the way
                ``count_tokens(..., normalize=True)`` does

        Returns:
            (char_index, token_count) where ``text[:char_index]`` holds
            ``token_count`` <= ``max_token_count`` tokens
        """
        if not text or max_token_count <= 0:
            return 0, 0
        ids, spans = self.encode_with_offsets(text)
        if not normalize:
            if len(ids) <= max_token_count:
                return len(text), len(ids)
            return spans[max_token_count][0], max_token_count

        total = self.count_tokens(text, normalize=True)
        if total <= max_token_count:
            return len(text), total

        # Normalization can grow or shrink a prefix, so search over raw token
        # boundaries for the longest prefix whose normalized count fits.
        low, high = 0, len(ids) - 1
        while low < high:
            middle = (low + high + 1) // 2
            if self.count_tokens(text[: spans[middle][0]], normalize=True) <= max_token_count:
                low = middle
            else:
                high = middle - 1
        if low == 0:
            return 0, 0
        index = spans[low][0]
        return index, self.count_tokens(text[:index], normalize=True)
