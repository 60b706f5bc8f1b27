"""
Pydantic schemas for document input and chunk output.
"""

import base64
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field

from chunking.chunk import Chunk
from documents import Document, Element, Footer, Header, Image, Paragraph, Section, Table


class ParagraphPayload(BaseModel):
    type: Literal["paragraph"] = "paragraph"
    markdown: str
    text: Optional[str] = None
    page_number: Optional[int] = None

    def to_element(self) -> Element:
        return Paragraph(self.markdown, self.text, self.page_number)


class HeaderPayload(BaseModel):
    type: Literal["header"] = "header"
    markdown: str
    text: Optional[str] = None
    level: Optional[int] = Field(default=None, ge=0, le=10)
    page_number: Optional[int] = None

    def to_element(self) -> Element:
        return Header(self.markdown, self.text, self.page_number, level=self.level)


class FooterPayload(BaseModel):
    type: Literal["footer"] = "footer"
    markdown: str = ""
    page_number: Optional[int] = None

    def to_element(self) -> Element:
        return Footer(self.markdown, page_number=self.page_number)


class ImagePayload(BaseModel):
    """Image element; ``content`` is base64 encoded."""

    type: Literal["image"] = "image"
    markdown: str = ""
    alternative_text: Optional[str] = None
    ocr_text: Optional[str] = None
    content: Optional[str] = None
    media_type: Optional[str] = None
    page_number: Optional[int] = None

    def to_element(self) -> Element:
        return Image(
            self.markdown,
            page_number=self.page_number,
            alternative_text=self.alternative_text,
            ocr_text=self.ocr_text,
            content=base64.b64decode(self.content) if self.content else None,
            media_type=self.media_type,
        )


class TablePayload(BaseModel):
    """Table element; the first row of ``cells`` is the header row."""

    type: Literal["table"] = "table"
    markdown: str = ""
    cells: List[List[Union[str, ImagePayload, ParagraphPayload]]] = Field(
        default_factory=list
    )
    page_number: Optional[int] = None

    def to_element(self) -> Element:
        cells = [
            [c if isinstance(c, str) else c.to_element() for c in row]
            for row in self.cells
        ]
        return Table(self.markdown, page_number=self.page_number, cells=cells)


class SectionPayload(BaseModel):
    type: Literal["section"] = "section"
    elements: List["ElementPayload"] = Field(default_factory=list)

    def to_element(self) -> Section:
        return Section(elements=[e.to_element() for e in self.elements])


ElementPayload = Annotated[
    Union[
        ParagraphPayload,
        HeaderPayload,
        FooterPayload,
        ImagePayload,
        TablePayload,
        SectionPayload,
    ],
    Field(discriminator="type"),
]

SectionPayload.model_rebuild()


class DocumentPayload(BaseModel):
    """A parsed document as produced by a reader."""

    identifier: str = Field(..., description="Stable document id used for provenance")
    sections: List[SectionPayload] = Field(default_factory=list)

    def to_document(self) -> Document:
        return Document(
            identifier=self.identifier,
            sections=[s.to_element() for s in self.sections],
        )


class ChunkRecord(BaseModel):
    """Exported chunk."""

    content: str
    token_count: Optional[int] = None
    context: Optional[str] = None
    document_id: Optional[str] = None
    spans: List[Tuple[int, int]] = Field(
        default_factory=list,
        description="Character ranges into the originating elements' content",
    )

    @classmethod
    def from_chunk(cls, chunk: Chunk) -> "ChunkRecord":
        return cls(
            content=chunk.content,
            token_count=chunk.token_count,
            context=chunk.context,
            document_id=chunk.document_id,
            spans=[(s.start, s.end) for s in chunk.source_spans],
        )
