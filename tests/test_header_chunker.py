"""Tests for HeaderChunker."""

import asyncio

import pytest

from chunking import ChunkerOptions, HeaderChunker, InvalidArgumentError
from documents import Document, Header, Paragraph, Section
from tests.conftest import chunk_bodies


def doc_of(*elements):
    return Document(identifier="doc", sections=[Section(elements=list(elements))])


@pytest.mark.asyncio
async def test_header_path_becomes_context(make_options):
    doc = doc_of(Header("# A"), Header("## B"), Header("### C"), Paragraph("Body text."))
    chunks = await HeaderChunker(make_options()).process(doc)

    assert len(chunks) == 1
    assert chunks[0].context == "A B C"
    assert chunks[0].content == "A B C\nBody text."
    assert chunks[0].document_id == "doc"


@pytest.mark.asyncio
async def test_sibling_header_replaces_level_and_clears_deeper(make_options):
    doc = doc_of(
        Header("# A"),
        Header("## B"),
        Header("### X"),
        Paragraph("one"),
        Header("## C"),
        Paragraph("two"),
    )
    chunks = await HeaderChunker(make_options()).process(doc)
    assert [c.context for c in chunks] == ["A B X", "A C"]


@pytest.mark.asyncio
async def test_content_before_first_header_has_no_context(make_options):
    doc = doc_of(Paragraph("preface"), Header("# A"), Paragraph("body"))
    chunks = await HeaderChunker(make_options()).process(doc)
    assert [c.content for c in chunks] == ["preface", "A\nbody"]
    assert chunks[0].context is None


@pytest.mark.asyncio
async def test_runs_across_nested_sections(make_options):
    doc = Document(
        identifier="doc",
        sections=[
            Section(elements=[Header("# A"), Section(elements=[Paragraph("x")])]),
            Section(elements=[Paragraph("y")]),
        ],
    )
    chunks = await HeaderChunker(make_options()).process(doc)
    assert [c.content for c in chunks] == ["A\nx\ny"]


@pytest.mark.asyncio
async def test_header_level_above_maximum_rejected(make_options):
    doc = doc_of(Header("deep", level=11), Paragraph("x"))
    with pytest.raises(InvalidArgumentError):
        await HeaderChunker(make_options()).process(doc)


@pytest.mark.asyncio
async def test_missing_document_rejected(make_options):
    with pytest.raises(InvalidArgumentError):
        await HeaderChunker(make_options()).process(None)


@pytest.mark.asyncio
async def test_header_level_below_zero_rejected(make_options):
    doc = doc_of(Header("odd", level=-1), Paragraph("x"))
    with pytest.raises(InvalidArgumentError):
        await HeaderChunker(make_options()).process(doc)


@pytest.mark.asyncio
async def test_body_text_emitted_once_in_order(make_options):
    paragraphs = [Paragraph(t) for t in ("preface", "one", "two", "three", "four")]
    doc = doc_of(
        paragraphs[0],
        Header("# A"),
        paragraphs[1],
        Header("## B"),
        paragraphs[2],
        paragraphs[3],
        Header("# C"),
        paragraphs[4],
    )

    chunks = await HeaderChunker(make_options(max_tokens=5)).process(doc)

    assert len(chunks) == 5
    assert "\n".join(chunk_bodies(chunks)) == "preface\none\ntwo\nthree\nfour"
    assert [s.element for c in chunks for s in c.source_spans] == paragraphs


@pytest.mark.asyncio
async def test_normalized_budget_holds_with_context(tokenizer):
    options = ChunkerOptions(tokenizer=tokenizer, max_tokens_per_chunk=20, overlap_tokens=0)
    text = " ".join(["ﷺ"] * 30)
    doc = doc_of(Header("# A"), Paragraph(text))

    chunks = await HeaderChunker(options).process(doc)

    assert "".join(chunk_bodies(chunks)) == text
    for chunk in chunks:
        assert chunk.context == "A"
        assert chunk.token_count == options.count_tokens(chunk.content) <= 20


@pytest.mark.asyncio
async def test_cancellation_abandons_remaining_runs(make_options):
    doc = doc_of(Header("# A"), Paragraph("x"), Header("# B"), Paragraph("y"))
    chunker = HeaderChunker(make_options())
    packed = []
    pack = chunker.packer.process

    def pack_then_cancel(context, elements, **kwargs):
        packed.append(context)
        task.cancel()
        return pack(context, elements, **kwargs)

    chunker.packer.process = pack_then_cancel
    task = asyncio.ensure_future(chunker.process(doc))

    with pytest.raises(asyncio.CancelledError):
        await task
    assert packed == ["A"]
