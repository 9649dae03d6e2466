"""Build the table of contents from NCX or EPUB3 nav documents."""

import logging
from abc import ABC, abstractmethod

from bs4 import BeautifulSoup, Tag

from epubkit.core.links import LinkResolver, parse_link
from epubkit.core.markup import (
    find_all_path,
    find_path,
    parse_html,
    parse_xml,
    text_of,
)
from epubkit.models.epub import OutlineNode

log = logging.getLogger(__name__)


class OutlineBuilder(ABC):
    """Strategy that turns a parsed navigation document into OutlineNodes."""

    def __init__(self, link_resolver: LinkResolver):
        self.link_resolver = link_resolver

    @abstractmethod
    def build(self, nav_doc: BeautifulSoup) -> list[OutlineNode]:
        """Return the top-level outline nodes."""


class NcxOutlineBuilder(OutlineBuilder):
    """EPUB2 NCX: explicit navPoint tree with playOrder and id attributes."""

    def build(self, nav_doc: BeautifulSoup) -> list[OutlineNode]:
        return self._parse_nav_points(find_all_path(nav_doc, "ncx", "navMap", "navPoint"))

    def _parse_nav_points(self, nav_points: list[Tag]) -> list[OutlineNode]:
        return [self._parse_nav_point(point) for point in nav_points]

    def _parse_nav_point(self, nav_point: Tag) -> OutlineNode:
        content = find_path(nav_point, "content")
        path = content.get("src", "") if content is not None else ""
        child_points = nav_point.find_all("navPoint", recursive=False)

        return OutlineNode(
            name=text_of(find_path(nav_point, "navLabel", "text"), ""),
            section_id=self.link_resolver.resolve_id(path),
            node_id=parse_link(path).hash or nav_point.get("id", ""),
            path=path,
            play_order=nav_point.get("playOrder"),
            children=self._parse_nav_points(child_points) if child_points else None,
        )


class NavOutlineBuilder(OutlineBuilder):
    """EPUB3 nav document: nested <ol>/<li> lists without explicit ordering.

    play_order is a single counter shared by the whole traversal and assigned
    in pre-order, so it follows reading sequence rather than any label.
    """

    def __init__(self, link_resolver: LinkResolver):
        super().__init__(link_resolver)
        self._running_index = 0

    def build(self, nav_doc: BeautifulSoup) -> list[OutlineNode]:
        self._running_index = 0
        toc_nav = self._find_toc_nav(nav_doc)
        if toc_nav is None:
            log.warning("Navigation document has no <nav> with a list")
            return []
        return self._parse_list(toc_nav.find("ol"))

    @staticmethod
    def _find_toc_nav(nav_doc: BeautifulSoup) -> Tag | None:
        for nav in nav_doc.find_all("nav"):
            if "toc" in (nav.get("epub:type") or "").split() and nav.find("ol"):
                return nav
        for nav in nav_doc.find_all("nav"):
            if nav.find("ol"):
                return nav
        return None

    def _parse_list(self, ol: Tag) -> list[OutlineNode]:
        return [self._parse_item(li) for li in ol.find_all("li", recursive=False)]

    def _parse_item(self, li: Tag) -> OutlineNode:
        self._running_index += 1
        play_order = self._running_index

        # <span> is used for unlinked headings
        label = li.find("a", recursive=False) or li.find("span", recursive=False)
        path = label.get("href", "") if label is not None and label.name == "a" else ""
        # Label text may be split across child elements (e.g. a number prefix)
        name = " ".join(label.get_text().split()) if label is not None else ""

        child_list = li.find("ol", recursive=False)
        children = self._parse_list(child_list) if child_list is not None else None

        return OutlineNode(
            name=name,
            section_id=self.link_resolver.resolve_id(path),
            node_id=parse_link(path).hash,
            path=path,
            play_order=play_order,
            children=children,
        )


def build_outline(nav_doc: BeautifulSoup, link_resolver: LinkResolver) -> list[OutlineNode]:
    """Build the outline with the strategy matching the document's root element."""
    if find_path(nav_doc, "ncx") is not None:
        builder: OutlineBuilder = NcxOutlineBuilder(link_resolver)
    elif find_path(nav_doc, "html") is not None:
        builder = NavOutlineBuilder(link_resolver)
    else:
        log.warning("Unrecognized navigation document; no outline built")
        return []
    return builder.build(nav_doc)


def parse_navigation(data: str | bytes) -> BeautifulSoup:
    """Parse a navigation document with the parser its schema needs.

    NCX is strict XML. EPUB3 nav documents are XHTML and may use HTML named
    entities (``&nbsp;``), which only the HTML parser decodes.
    """
    nav_doc = parse_xml(data)
    if find_path(nav_doc, "ncx") is not None:
        return nav_doc
    return parse_html(data)
