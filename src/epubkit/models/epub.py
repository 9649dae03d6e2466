"""Data models for EPUB structure."""

from pydantic import BaseModel, ConfigDict, Field


class ManifestItem(BaseModel):
    """Single item declared in the package manifest."""

    model_config = ConfigDict(frozen=True)

    id: str
    href: str  # relative to the content root
    media_type: str | None = None
    properties: list[str] = Field(default_factory=list)


class OutlineNode(BaseModel):
    """Single entry in the table of contents."""

    name: str
    section_id: str = ""  # "" when the link matches no manifest item
    node_id: str = ""
    path: str = ""
    play_order: int | str | None = None
    children: list["OutlineNode"] | None = None


class BookInfo(BaseModel):
    """Book-level metadata. Fields missing from the package stay unset."""

    title: str | None = None
    author: list[str] | None = None
    description: str | None = None
    language: str | None = None
    publisher: str | None = None
    rights: str | None = None

    def as_dict(self) -> dict:
        """Return only the fields present in the source."""
        return self.model_dump(exclude_none=True)
