"""Parser configuration."""

from typing import Callable, Literal

from pydantic import BaseModel, ConfigDict

SourceKind = Literal["path", "buffer", "binary_string"]


class ParserOptions(BaseModel):
    """Options accepted by the EPUB parser."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    # How a str target is interpreted; bytes are always treated as a buffer
    source_kind: SourceKind = "path"
    # Rewrite internal links and inline images when building sections
    expand: bool = False
    # Registered on every built section and used by Section.to_markdown()
    convert_to_markdown: Callable[[str], str] | None = None
