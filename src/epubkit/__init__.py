"""Parse EPUB containers into a normalized document model."""

from epubkit.core.epub_parser import EpubDocument, EpubParser, parse_epub
from epubkit.core.section import Section
from epubkit.errors import EntryNotFoundError, EpubError, PackageDocumentError
from epubkit.models import BookInfo, ManifestItem, OutlineNode, ParserOptions

__all__ = [
    "parse_epub",
    "EpubParser",
    "EpubDocument",
    "Section",
    "ParserOptions",
    "BookInfo",
    "ManifestItem",
    "OutlineNode",
    "EpubError",
    "EntryNotFoundError",
    "PackageDocumentError",
]
