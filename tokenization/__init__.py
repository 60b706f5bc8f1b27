"""
Tokenizers used to measure and cut text against token budgets.

Usage:
    from tokenization import TiktokenTokenizer

    tokenizer = TiktokenTokenizer()                  # cl100k_base
    tokenizer = TiktokenTokenizer(model_name="gpt-4")
    index, count = tokenizer.get_index_by_token_count(text, 100)
"""

from .base import Tokenizer
from .hf_tokenizer import HuggingFaceTokenizer
from .tiktoken_tokenizer import TiktokenTokenizer, get_default_tokenizer

__all__ = [
    "Tokenizer",
    "TiktokenTokenizer",
    "HuggingFaceTokenizer",
    "get_default_tokenizer",
]
