"""
tiktoken-backed tokenizer.

Default encoding is cl100k_base, the encoding used by the gpt-4 and
gpt-3.5 family and by the embedding models the rest of the stack targets.
"""

import logging
from typing import List, Optional, Sequence, Tuple

import tiktoken

from .base import Span, Tokenizer

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "cl100k_base"


class TiktokenTokenizer(Tokenizer):
    """
    Tokenizer over a tiktoken encoding.

    Usage:
        tokenizer = TiktokenTokenizer()
        tokenizer = TiktokenTokenizer(model_name="gpt-4")
    """

    def __init__(
        self,
        encoding_name: str = DEFAULT_ENCODING,
        model_name: Optional[str] = None,
    ):
        self.encoding_name = encoding_name
        self.model_name = model_name
        self._encoding: Optional[tiktoken.Encoding] = None

    @property
    def encoding(self) -> tiktoken.Encoding:
        """Lazy load the encoding."""
        if self._encoding is None:
            if self.model_name:
                logger.info(f"Loading tiktoken encoding for model: {self.model_name}")
                self._encoding = tiktoken.encoding_for_model(self.model_name)
            else:
                logger.info(f"Loading tiktoken encoding: {self.encoding_name}")
                self._encoding = tiktoken.get_encoding(self.encoding_name)
        return self._encoding

    def encode(self, text: str) -> List[int]:
        # Special-token text is counted as ordinary text.
        return self.encoding.encode(text, disallowed_special=())

    def decode(self, ids: Sequence[int]) -> str:
        return self.encoding.decode(list(ids))

    def encode_with_offsets(self, text: str) -> Tuple[List[int], List[Span]]:
        ids = self.encode(text)
        if not ids:
            return [], []
        _, starts = self.encoding.decode_with_offsets(ids)
        ends = starts[1:] + [len(text)]
        return ids, list(zip(starts, ends))


_default_tokenizer: Optional[TiktokenTokenizer] = None


def get_default_tokenizer() -> TiktokenTokenizer:
    """Get or create the shared cl100k_base tokenizer."""
    global _default_tokenizer
    if _default_tokenizer is None:
        _default_tokenizer = TiktokenTokenizer()
    return _default_tokenizer
