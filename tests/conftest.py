"""Shared fixtures: deterministic fakes for every external collaborator."""

import re
from typing import Dict, List, Sequence, Tuple

import numpy as np
import pytest

from chunking import BoundaryClassifier, ChunkerOptions
from embeddings import EmbeddingGenerator
from llm import ChatClient, ChatOptions
from shared.circuit_breaker import reset_breakers
from tokenization import Tokenizer

TOKEN_PATTERN = re.compile(r"\n|[^\S\n]*\S+")


class WordTokenizer(Tokenizer):
    """One token per word (with its leading spaces); newline is its own token."""

    def __init__(self):
        self.vocab: Dict[str, int] = {}
        self.inverse: Dict[int, str] = {}

    def _id(self, piece: str) -> int:
        if piece not in self.vocab:
            self.vocab[piece] = len(self.vocab)
            self.inverse[self.vocab[piece]] = piece
        return self.vocab[piece]

    def encode(self, text: str) -> List[int]:
        return self.encode_with_offsets(text)[0]

    def decode(self, ids: Sequence[int]) -> str:
        return "".join(self.inverse[i] for i in ids)

    def encode_with_offsets(self, text: str) -> Tuple[List[int], List[Tuple[int, int]]]:
        ids, spans = [], []
        for match in TOKEN_PATTERN.finditer(text):
            ids.append(self._id(match.group()))
            spans.append(match.span())
        return ids, spans


class KeywordEmbeddingGenerator(EmbeddingGenerator):
    """Texts mentioning a topic keyword map onto that topic's axis."""

    def __init__(self, topics: Sequence[str]):
        self.topics = list(topics)
        self.calls: List[List[str]] = []

    async def embed(self, texts):
        self.calls.append(list(texts))
        vectors = []
        for text in texts:
            vectors.append([1.0 if topic in text else 0.0 for topic in self.topics])
        return vectors


class ScriptedChatClient(ChatClient):
    """Replies with canned answers in order and records every request."""

    def __init__(self, replies: Sequence[str]):
        self.replies = list(replies)
        self.requests: List[Tuple[str, str, ChatOptions]] = []

    async def complete(self, system_prompt, user_message, options=None):
        self.requests.append((system_prompt, user_message, options))
        return self.replies.pop(0) if self.replies else "Answer: ID -1"


class MarkerClassifier(BoundaryClassifier):
    """Scores tokens starting with ``marker`` as segment starts."""

    def __init__(self, tokenizer: WordTokenizer, marker: str = "#"):
        self.tokenizer = tokenizer
        self.marker = marker
        self.windows: List[int] = []

    def classify(self, token_ids):
        self.windows.append(len(token_ids))
        rows = []
        for token_id in token_ids:
            if self.tokenizer.decode([token_id]).strip().startswith(self.marker):
                rows.append([0.0, 5.0])
            else:
                rows.append([5.0, 0.0])
        return np.array(rows).reshape(len(token_ids), 2)


@pytest.fixture
def tokenizer():
    return WordTokenizer()


@pytest.fixture
def make_options(tokenizer):
    def _make(max_tokens: int = 100, overlap: int = 0) -> ChunkerOptions:
        return ChunkerOptions(
            tokenizer=tokenizer,
            max_tokens_per_chunk=max_tokens,
            overlap_tokens=overlap,
            consider_normalization=False,
        )

    return _make


@pytest.fixture(autouse=True)
def fresh_breakers():
    reset_breakers()
    yield
    reset_breakers()


def chunk_bodies(chunks) -> List[str]:
    """Chunk contents with an embedded context prefix removed."""
    bodies = []
    for chunk in chunks:
        content = chunk.content
        if chunk.context and content.startswith(chunk.context + "\n"):
            content = content[len(chunk.context) + 1 :]
        bodies.append(content)
    return bodies
