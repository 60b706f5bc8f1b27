"""Tests for ChunkerOptions validation."""

import pytest

from chunking import ChunkerOptions, InvalidArgumentError
from tests.conftest import WordTokenizer


def test_defaults():
    """Defaults are 2000 tokens with 500 overlap and both flags on."""
    options = ChunkerOptions(tokenizer=WordTokenizer())
    assert options.max_tokens_per_chunk == 2000
    assert options.overlap_tokens == 500
    assert options.consider_pre_tokenization is True
    assert options.consider_normalization is True


def test_default_overlap_shrinks_for_small_budget():
    options = ChunkerOptions(tokenizer=WordTokenizer(), max_tokens_per_chunk=100)
    assert options.overlap_tokens == 0


@pytest.mark.parametrize("value", [0, -1])
def test_non_positive_max_rejected(value):
    options = ChunkerOptions(tokenizer=WordTokenizer())
    with pytest.raises(InvalidArgumentError):
        options.max_tokens_per_chunk = value


def test_overlap_must_be_below_max():
    options = ChunkerOptions(tokenizer=WordTokenizer(), max_tokens_per_chunk=100)
    with pytest.raises(InvalidArgumentError, match="less than chunk size"):
        options.overlap_tokens = 100


def test_negative_overlap_rejected():
    options = ChunkerOptions(tokenizer=WordTokenizer(), max_tokens_per_chunk=100)
    with pytest.raises(InvalidArgumentError):
        options.overlap_tokens = -1


def test_lowering_max_below_overlap_rejected():
    """Options never hold overlap >= max, whatever the mutation order."""
    options = ChunkerOptions(
        tokenizer=WordTokenizer(), max_tokens_per_chunk=100, overlap_tokens=50
    )
    with pytest.raises(InvalidArgumentError):
        options.max_tokens_per_chunk = 50
    assert options.max_tokens_per_chunk == 100


def test_invalid_argument_is_value_error():
    with pytest.raises(ValueError):
        ChunkerOptions(tokenizer=WordTokenizer(), max_tokens_per_chunk=0)


def test_count_tokens_normalizes():
    """NFKC folds the ligature into plain letters before counting."""
    options = ChunkerOptions(tokenizer=WordTokenizer(), max_tokens_per_chunk=10)
    assert options.count_tokens("ﬁne day") == 2
    assert options.count_tokens("") == 0
