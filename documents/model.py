"""
Document tree: sections holding elements, elements carrying markdown.

The tree is produced by document readers and treated as read-only by the
chunking engine. Every element exposes ``semantic_content``, the text that
gets embedded and counted against the token budget.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union


@dataclass
class Element:
    """Base element: markdown rendering plus optional plain text."""

    markdown: str = ""
    text: Optional[str] = None
    page_number: Optional[int] = None

    def __post_init__(self):
        if self.text is None:
            self.text = self.markdown

    @property
    def semantic_content(self) -> str:
        return self.markdown


@dataclass
class Paragraph(Element):
    pass


@dataclass
class Header(Element):
    """Heading element. ``level`` 1 is the outermost heading."""

    level: Optional[int] = None

    def __post_init__(self):
        stripped = self.markdown.lstrip()
        hashes = len(stripped) - len(stripped.lstrip("#"))
        if self.level is None and hashes:
            self.level = hashes
        if self.text is None:
            self.text = stripped.lstrip("#").strip()


@dataclass
class Footer(Element):
    """Page furniture. Never contributes content to chunks."""

    @property
    def semantic_content(self) -> str:
        return ""


@dataclass
class Image(Element):
    """Image with optional description and OCR text."""

    alternative_text: Optional[str] = None
    ocr_text: Optional[str] = None
    content: Optional[bytes] = None
    media_type: Optional[str] = None

    @property
    def semantic_content(self) -> str:
        if self.alternative_text:
            return self.alternative_text
        return self.ocr_text or ""


def _render_cell(cell: Element) -> str:
    return cell.semantic_content.replace("\n", " ").replace("|", "\\|").strip()


@dataclass
class Table(Element):
    """
    Table as a grid of cell elements.

    The first row of ``cells`` is the header row. Plain strings are accepted
    as cells and wrapped in ``Paragraph``. When no markdown is supplied it is
    rendered from the grid as a pipe table.
    """

    cells: List[List[Union[Element, str]]] = field(default_factory=list)

    def __post_init__(self):
        self.cells = [
            [Paragraph(c) if isinstance(c, str) else c for c in row]
            for row in self.cells
        ]
        if not self.markdown and self.cells:
            lines = [self.header_row(), self.separator_row()] + self.data_rows()
            self.markdown = "\n".join(lines)
        super().__post_init__()

    @staticmethod
    def render_row(row: List[Element]) -> str:
        return "| " + " | ".join(_render_cell(c) for c in row) + " |"

    def header_row(self) -> str:
        return self.render_row(self.cells[0]) if self.cells else ""

    def separator_row(self) -> str:
        if not self.cells:
            return ""
        return "| " + " | ".join("---" for _ in self.cells[0]) + " |"

    def data_rows(self) -> List[str]:
        return [self.render_row(row) for row in self.cells[1:]]


@dataclass
class Section(Element):
    """Ordered container of elements; may nest further sections."""

    elements: List[Element] = field(default_factory=list)

    @property
    def semantic_content(self) -> str:
        return ""

    def to_markdown(self) -> str:
        """Children's markdown joined by newlines."""
        return "\n".join(e.markdown for e in _iter_leaves(self.elements) if e.markdown)


@dataclass
class Document:
    """A parsed document: identifier plus top-level sections."""

    identifier: str
    sections: List[Section] = field(default_factory=list)

    def iter_content(self) -> Iterator[Element]:
        """Yield every non-section element in source order."""
        return _iter_leaves(self.sections)

    def __iter__(self) -> Iterator[Element]:
        return self.iter_content()

    def to_markdown(self) -> str:
        rendered = (s.to_markdown() for s in self.sections)
        return "\n".join(text for text in rendered if text)


def _iter_leaves(elements: List[Element]) -> Iterator[Element]:
    """
    Walk nested sections depth-first with an explicit stack of iterators,
    so deep trees do not hit the recursion limit.
    """
    stack = [iter(elements)]
    while stack:
        try:
            element = next(stack[-1])
        except StopIteration:
            stack.pop()
            continue
        if isinstance(element, Section):
            stack.append(iter(element.elements))
        else:
            yield element
