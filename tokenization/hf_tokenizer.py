"""
HuggingFace fast-tokenizer adapter.

Used where a model-specific vocabulary matters, e.g. the BERT-style
boundary classifier behind the neural splitting strategy.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from .base import Span, Tokenizer

logger = logging.getLogger(__name__)


class HuggingFaceTokenizer(Tokenizer):
    """
    Tokenizer backed by ``transformers.AutoTokenizer`` (fast variant).

    Ids never include special tokens; ``cls_token_id`` and ``sep_token_id``
    are exposed for callers that wrap windows themselves.

    Usage:
        tokenizer = HuggingFaceTokenizer("bert-base-multilingual-cased")
    """

    def __init__(self, model_name: str, tokenizer=None):
        self.model_name = model_name
        self._tokenizer = tokenizer

    @property
    def tokenizer(self):
        """Lazy load tokenizer."""
        if self._tokenizer is None:
            from transformers import AutoTokenizer

            logger.info(f"Loading tokenizer: {self.model_name}")
            self._tokenizer = AutoTokenizer.from_pretrained(
                self.model_name, use_fast=True
            )
        return self._tokenizer

    @property
    def cls_token_id(self) -> Optional[int]:
        return self.tokenizer.cls_token_id

    @property
    def sep_token_id(self) -> Optional[int]:
        return self.tokenizer.sep_token_id

    def encode(self, text: str) -> List[int]:
        return self.tokenizer(text, add_special_tokens=False)["input_ids"]

    def decode(self, ids: Sequence[int]) -> str:
        return self.tokenizer.decode(list(ids))

    def encode_with_offsets(self, text: str) -> Tuple[List[int], List[Span]]:
        encoded = self.tokenizer(
            text, add_special_tokens=False, return_offsets_mapping=True
        )
        spans = [(int(start), int(end)) for start, end in encoded["offset_mapping"]]
        return list(encoded["input_ids"]), spans
