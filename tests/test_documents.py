"""Tests for the document model."""

from documents import Document, Footer, Header, Image, Paragraph, Section, Table


def test_flatten_preserves_order_and_skips_sections():
    inner = Section(elements=[Paragraph("b"), Section(elements=[Paragraph("c")])])
    doc = Document(
        identifier="doc",
        sections=[Section(elements=[Paragraph("a"), inner, Paragraph("d")]),
                  Section(elements=[Paragraph("e")])],
    )
    assert [e.markdown for e in doc] == ["a", "b", "c", "d", "e"]


def test_deeply_nested_sections_do_not_recurse():
    section = Section(elements=[Paragraph("leaf")])
    for _ in range(5000):
        section = Section(elements=[section])
    doc = Document(identifier="deep", sections=[section])
    assert [e.markdown for e in doc.iter_content()] == ["leaf"]


def test_image_semantic_content_fallbacks():
    assert Image(alternative_text="A cat", ocr_text="CAT").semantic_content == "A cat"
    assert Image(ocr_text="CAT").semantic_content == "CAT"
    assert Image().semantic_content == ""


def test_footer_has_no_semantic_content():
    assert Footer("Page 3").semantic_content == ""


def test_header_level_and_text_from_markdown():
    header = Header("## Getting started")
    assert header.level == 2
    assert header.text == "Getting started"
    explicit = Header("Title", level=1)
    assert explicit.text == "Title"


def test_table_renders_pipe_markdown():
    table = Table(cells=[["one", "two"], ["a", "b|c"]])
    assert table.header_row() == "| one | two |"
    assert table.separator_row() == "| --- | --- |"
    assert table.data_rows() == ["| a | b\\|c |"]
    assert table.markdown == "| one | two |\n| --- | --- |\n| a | b\\|c |"


def test_table_image_cell_uses_description():
    table = Table(cells=[["pic"], [Image(alternative_text="chart of sales")]])
    assert table.data_rows() == ["| chart of sales |"]


def test_document_markdown():
    doc = Document(
        identifier="doc",
        sections=[Section(elements=[Header("# T"), Paragraph("body")])],
    )
    assert doc.to_markdown() == "# T\nbody"
