"""Data models for exported books."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from epubkit.models.epub import BookInfo, OutlineNode


class SectionOutput(BaseModel):
    """One exported section file."""

    index: int
    section_id: str
    title: str
    source_file: str
    output_file: str
    word_count: int


class BookOutput(BaseModel):
    """Manifest written next to the exported sections."""

    source_path: str
    info: BookInfo
    table_of_contents: list[OutlineNode] | None = None
    navigation_file_path: str | None = None
    sections: list[SectionOutput]
    format: Literal["markdown", "text"] = "markdown"
    created_at: datetime = Field(default_factory=datetime.now)
