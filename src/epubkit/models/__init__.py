"""Data models."""

from epubkit.models.epub import BookInfo, ManifestItem, OutlineNode
from epubkit.models.html import HtmlNode
from epubkit.models.options import ParserOptions, SourceKind
from epubkit.models.output import BookOutput, SectionOutput

__all__ = [
    # EPUB models
    "ManifestItem",
    "OutlineNode",
    "BookInfo",
    # Section markup
    "HtmlNode",
    # Configuration
    "ParserOptions",
    "SourceKind",
    # Output models
    "SectionOutput",
    "BookOutput",
]
