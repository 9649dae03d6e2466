"""Generic object form of section markup."""

from typing import Literal

from pydantic import BaseModel, Field


class HtmlNode(BaseModel):
    """Element or text node of a section body."""

    type: Literal["element", "text"]
    tag: str | None = None
    text: str | None = None
    attrs: dict[str, str] = Field(default_factory=dict)
    children: list["HtmlNode"] = Field(default_factory=list)
