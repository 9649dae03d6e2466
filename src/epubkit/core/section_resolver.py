"""Resolve manifest items into Sections."""

import logging
from collections.abc import Mapping

from epubkit.core.archive import ArchiveAccessor
from epubkit.core.links import LinkResolver
from epubkit.core.section import Section, build_section
from epubkit.models.epub import ManifestItem
from epubkit.models.options import ParserOptions

log = logging.getLogger(__name__)


class SectionResolver:
    """Build sections for spine entries, or for any manifest item on demand."""

    def __init__(
        self,
        archive: ArchiveAccessor,
        manifest: list[ManifestItem],
        spine: Mapping[str, int],
        link_resolver: LinkResolver,
        options: ParserOptions,
    ):
        self.archive = archive
        self.spine = spine
        self.link_resolver = link_resolver
        self.options = options
        self._items = {item.id: item for item in manifest}

    def resolve(self, id: str) -> Section | None:
        """Build a fresh Section for manifest item ``id``.

        Returns None if the manifest has no such item.
        """
        item = self._items.get(id)
        if item is None:
            return None
        return self._build(item)

    def _build(self, item: ManifestItem) -> Section:
        html = self.archive.resolve(item.href).text
        section = build_section(
            id=item.id,
            html_string=html,
            resource_resolver=self.archive.resolve,
            id_resolver=self.link_resolver.resolve_id,
            expand=self.options.expand,
            href=item.href,
        )
        if self.options.convert_to_markdown is not None:
            section.register(self.options.convert_to_markdown)
        return section

    def resolve_all(self) -> list[Section]:
        """One section per spine entry, indexed by reading order."""
        ordered_ids = sorted(set(self.spine), key=self.spine.__getitem__)
        # parse_spine only keeps ids present in the manifest
        sections = [self._build(self._items[id]) for id in ordered_ids]
        log.debug("Resolved %d spine sections", len(sections))
        return sections

    def get_section(self, id: str, sections: list[Section]) -> Section | None:
        """Pre-resolved spine section, or a fresh one for out-of-spine items."""
        index = self.spine.get(id)
        if index is None:
            return self.resolve(id)
        if index < 0 or index >= len(sections):
            return None
        return sections[index]
