"""EPUB parsing: staged build of a read-only EpubDocument."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from epubkit.core.archive import ArchiveAccessor, ArchiveEntry
from epubkit.core.links import LinkResolver
from epubkit.core.metadata import extract_metadata
from epubkit.core.package import PackageDocument, read_package
from epubkit.core.section import Section
from epubkit.core.section_resolver import SectionResolver
from epubkit.core.toc import build_outline, parse_navigation
from epubkit.models.epub import BookInfo, ManifestItem, OutlineNode
from epubkit.models.options import ParserOptions, SourceKind

log = logging.getLogger(__name__)

EpubSource = str | os.PathLike | bytes | bytearray


class EpubDocument:
    """Fully parsed EPUB. Only ever created by EpubParser.parse()."""

    def __init__(
        self,
        archive: ArchiveAccessor,
        package: PackageDocument,
        link_resolver: LinkResolver,
        section_resolver: SectionResolver,
        info: BookInfo,
        table_of_contents: list[OutlineNode] | None,
        sections: list[Section],
    ):
        self._archive = archive
        self._package = package
        self._link_resolver = link_resolver
        self._section_resolver = section_resolver
        self._info = info
        self._toc = table_of_contents
        self._sections = tuple(sections)
        self._spine = MappingProxyType(dict(package.spine))

    def __enter__(self) -> EpubDocument:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def info(self) -> BookInfo:
        return self._info

    @property
    def table_of_contents(self) -> list[OutlineNode] | None:
        """Outline tree, or None when the book has no navigation file."""
        return self._toc

    @property
    def sections(self) -> tuple[Section, ...]:
        """Spine sections in reading order."""
        return self._sections

    @property
    def navigation_file_path(self) -> str | None:
        """Navigation document href relative to the content root."""
        navigation = self._package.navigation
        return navigation.href if navigation is not None else None

    @property
    def manifest(self) -> tuple[ManifestItem, ...]:
        return tuple(self._package.manifest)

    @property
    def spine(self) -> Mapping[str, int]:
        return self._spine

    @property
    def content_root(self) -> str:
        return self._package.root

    @property
    def package_path(self) -> str:
        return self._package.path

    def resolve(self, path: str) -> ArchiveEntry:
        """Read a file from the book (see ArchiveAccessor.resolve)."""
        return self._archive.resolve(path)

    def get_item_id(self, href: str) -> str:
        """Manifest id for ``href``, or "" if it matches no item."""
        return self._link_resolver.resolve_id(href)

    def get_section(self, id: str) -> Section | None:
        """Section for a manifest id, resolving items outside the spine on demand."""
        return self._section_resolver.get_section(id, list(self._sections))

    def close(self) -> None:
        """Release the underlying archive."""
        self._archive.close()


class EpubParser:
    """Parse EPUB files and extract structure.

    Stages run in dependency order: package document (manifest, spine,
    metadata), link resolution, table of contents, sections. Each stage only
    receives the outputs of earlier ones, and the document is created after
    all of them have succeeded.
    """

    def __init__(self, source: EpubSource, options: ParserOptions | None = None):
        self.source = source
        self.options = options or ParserOptions()

    def parse(self) -> EpubDocument:
        """Parse the EPUB and return the complete document.

        Raises:
            EntryNotFoundError: If a required archive entry is missing
            PackageDocumentError: If the package document cannot be located
                or parsed
            EpubError: If the source is not a zip container
        """
        archive = ArchiveAccessor(self.source)
        try:
            return self._build(archive)
        except Exception:
            archive.close()
            raise

    def _build(self, archive: ArchiveAccessor) -> EpubDocument:
        package = read_package(archive)
        archive = archive.with_root(package.root)
        log.debug(
            "Manifest has %d items, spine %d entries",
            len(package.manifest),
            len(package.spine),
        )

        link_resolver = LinkResolver(package.manifest)
        toc = self._build_toc(archive, package, link_resolver)
        info = extract_metadata(package.metadata)

        section_resolver = SectionResolver(
            archive, package.manifest, package.spine, link_resolver, self.options
        )
        sections = section_resolver.resolve_all()

        return EpubDocument(
            archive=archive,
            package=package,
            link_resolver=link_resolver,
            section_resolver=section_resolver,
            info=info,
            table_of_contents=toc,
            sections=sections,
        )

    @staticmethod
    def _build_toc(
        archive: ArchiveAccessor,
        package: PackageDocument,
        link_resolver: LinkResolver,
    ) -> list[OutlineNode] | None:
        if package.navigation is None:
            log.debug("No navigation file; skipping table of contents")
            return None
        nav_doc = parse_navigation(archive.resolve(package.navigation.href).data)
        return build_outline(nav_doc, link_resolver)


def load_source(target: EpubSource, source_kind: SourceKind) -> str | os.PathLike | bytes:
    """Interpret ``target`` as a filesystem path or as container bytes."""
    if isinstance(target, (bytes, bytearray)):
        return bytes(target)
    if isinstance(target, str) and source_kind in ("buffer", "binary_string"):
        return target.encode("latin-1")
    return target


def parse_epub(
    target: EpubSource,
    options: ParserOptions | None = None,
    **overrides: Any,
) -> EpubDocument:
    """Parse an EPUB from a path or from its bytes.

    Args:
        target: Filesystem path, container bytes, or a str holding the
            container as a binary string (with source_kind="binary_string")
        options: Parser options; defaults are used when omitted
        **overrides: Option fields overriding ``options`` (e.g. expand=True)

    Returns:
        The fully parsed EpubDocument
    """
    base = dict(options) if options is not None else {}
    merged = ParserOptions.model_validate({**base, **overrides})
    return EpubParser(load_source(target, merged.source_kind), merged).parse()
