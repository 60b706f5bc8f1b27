"""
Structured document model consumed by the chunkers.

Readers (PDF, DOCX, Markdown, ...) turn source files into a tree of
sections and elements. The chunking engine only reads this tree.

Usage:
    from documents import Document, Section, Header, Paragraph

    doc = Document(
        identifier="handbook",
        sections=[Section(elements=[Header("# Intro", level=1), Paragraph("Hello.")])],
    )
    for element in doc:
        print(element.semantic_content)
"""

from .model import (
    Document,
    Element,
    Footer,
    Header,
    Image,
    Paragraph,
    Section,
    Table,
)

__all__ = [
    "Document",
    "Element",
    "Section",
    "Paragraph",
    "Header",
    "Table",
    "Image",
    "Footer",
]
