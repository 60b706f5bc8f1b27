"""Tests for DelimiterSplittingStrategy."""

import pytest

from chunking import BudgetExceededError, DelimiterSplittingStrategy, InvalidArgumentError


def test_text_that_fits_is_one_segment(tokenizer):
    strategy = DelimiterSplittingStrategy(tokenizer)
    text = "This is the first paragraph.\nThis is the second paragraph."
    assert strategy.get_split_offsets(text, 200) == [len(text)]


def test_splits_after_newline(tokenizer):
    strategy = DelimiterSplittingStrategy(tokenizer)
    assert strategy.get_split_offsets("line1\nline2", 200) == [11]
    assert strategy.get_split_offsets("line1\nline2", 2) == [6, 11]


def test_without_delimiter_cuts_at_token_boundary(tokenizer):
    strategy = DelimiterSplittingStrategy(tokenizer)
    text = "one two three four"
    offsets = strategy.get_split_offsets(text, 2)
    assert offsets == [7, 18]
    assert text[:7] == "one two"


def test_segments_cover_text_and_respect_budget(tokenizer):
    strategy = DelimiterSplittingStrategy(tokenizer)
    text = "a b c\nd e f g h\ni j\nk l m n o p"
    offsets = strategy.get_split_offsets(text, 4)
    assert offsets[-1] == len(text)
    assert offsets == sorted(offsets)
    start = 0
    for end in offsets:
        assert tokenizer.count_tokens(text[start:end]) <= 4
        start = end


def test_empty_text(tokenizer):
    assert DelimiterSplittingStrategy(tokenizer).get_split_offsets("", 10) == []


def test_zero_budget_rejected(tokenizer):
    with pytest.raises(InvalidArgumentError):
        DelimiterSplittingStrategy(tokenizer).get_split_offsets("text", 0)


def test_no_token_fits(tokenizer, monkeypatch):
    """A tokenizer that cannot place even one token makes splitting fail."""
    monkeypatch.setattr(tokenizer, "get_index_by_token_count", lambda text, n, normalize=False: (0, 0))
    with pytest.raises(BudgetExceededError):
        DelimiterSplittingStrategy(tokenizer).get_split_offsets("word", 1)
