"""Tests for SemanticSimilarityChunker."""

import pytest

from chunking import InvalidArgumentError, SemanticSimilarityChunker
from documents import Document, Image, Paragraph, Section
from tests.conftest import KeywordEmbeddingGenerator, chunk_bodies


def doc_of(*texts):
    return Document(
        identifier="doc",
        sections=[Section(elements=[Paragraph(t) for t in texts])],
    )


@pytest.mark.asyncio
async def test_topic_change_starts_new_chunk(make_options):
    generator = KeywordEmbeddingGenerator(["apple", "engine"])
    chunker = SemanticSimilarityChunker(generator, make_options())
    doc = doc_of("apple pie", "apple tart", "engine oil", "engine block")

    chunks = await chunker.process(doc)

    assert [c.content for c in chunks] == ["apple pie\napple tart", "engine oil\nengine block"]
    assert all(c.context is None for c in chunks)
    assert len(generator.calls) == 1


@pytest.mark.asyncio
async def test_similar_paragraphs_stay_together(make_options):
    generator = KeywordEmbeddingGenerator(["text"])
    chunker = SemanticSimilarityChunker(generator, make_options())
    chunks = await chunker.process(doc_of("text1", "text2"))
    assert [c.content for c in chunks] == ["text1\ntext2"]


@pytest.mark.asyncio
async def test_empty_elements_are_not_embedded(make_options):
    generator = KeywordEmbeddingGenerator(["a"])
    chunker = SemanticSimilarityChunker(generator, make_options())
    doc = Document(
        identifier="doc",
        sections=[Section(elements=[Image(), Paragraph("a one"), Paragraph(" ")])],
    )
    chunks = await chunker.process(doc)
    assert generator.calls == [["a one"]]
    assert [c.content for c in chunks] == ["a one"]


@pytest.mark.asyncio
async def test_empty_document_makes_no_call(make_options):
    generator = KeywordEmbeddingGenerator(["a"])
    chunks = await SemanticSimilarityChunker(generator, make_options()).process(
        Document(identifier="empty")
    )
    assert chunks == []
    assert generator.calls == []


@pytest.mark.asyncio
async def test_zero_vectors_count_as_unrelated(make_options):
    generator = KeywordEmbeddingGenerator(["apple"])
    chunker = SemanticSimilarityChunker(generator, make_options(), threshold_percentile=0)
    chunks = await chunker.process(doc_of("apple", "pear", "apple"))
    assert len(chunks) == 3


@pytest.mark.parametrize("value", [-1, 100.5])
def test_percentile_out_of_range_rejected(make_options, value):
    with pytest.raises(InvalidArgumentError):
        SemanticSimilarityChunker(KeywordEmbeddingGenerator([]), make_options(), value)


@pytest.mark.asyncio
async def test_unrelated_final_sentence_splits_off(make_options):
    generator = KeywordEmbeddingGenerator([".NET", "Zeus"])
    chunker = SemanticSimilarityChunker(generator, make_options())
    doc = doc_of(
        ".NET is a developer platform.",
        ".NET runs on Linux.",
        "C# compiles to .NET IL.",
        "Zeus ruled Olympus.",
    )
    chunks = await chunker.process(doc)
    assert len(chunks) == 2
    assert chunks[1].content == "Zeus ruled Olympus."


@pytest.mark.asyncio
async def test_body_text_emitted_once_in_order(make_options):
    texts = ["cat one", "cat two", "dog three", "dog four", "cat five"]
    generator = KeywordEmbeddingGenerator(["cat", "dog"])

    chunks = await SemanticSimilarityChunker(generator, make_options(max_tokens=3)).process(
        doc_of(*texts)
    )

    assert "\n".join(chunk_bodies(chunks)) == "\n".join(texts)
    assert all(c.token_count <= 3 for c in chunks)
