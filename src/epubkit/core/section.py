"""Content sections built from manifest items."""

from __future__ import annotations

import base64
import mimetypes
import posixpath
import re
from typing import Callable

from bs4 import NavigableString, Tag
from bs4.element import Comment, Doctype, ProcessingInstruction

from epubkit.core.archive import ArchiveEntry
from epubkit.core.converter import html_to_markdown, html_to_text
from epubkit.core.links import parse_link
from epubkit.core.markup import parse_html
from epubkit.models.html import HtmlNode

ResourceResolver = Callable[[str], ArchiveEntry]
IdResolver = Callable[[str], str]
MarkdownConverter = Callable[[str], str]

_EXTERNAL_URI = re.compile(r"^(?:[a-z][a-z0-9+.-]*:|//)", re.IGNORECASE)
_SKIPPED_STRINGS = (Comment, Doctype, ProcessingInstruction)


def is_internal_uri(uri: str) -> bool:
    """True for links pointing inside the container."""
    return not _EXTERNAL_URI.match(uri)


def join_href(base_href: str, path: str) -> str:
    """Content-root path of ``path`` as referenced from the document ``base_href``."""
    joined = posixpath.normpath(posixpath.join("/", posixpath.dirname(base_href), path))
    return joined.lstrip("/")


class Section:
    """One content document (usually a chapter) of the book."""

    def __init__(
        self,
        id: str,
        html_string: str,
        href: str = "",
        resource_resolver: ResourceResolver | None = None,
        id_resolver: IdResolver | None = None,
        expand: bool = False,
    ):
        self.id = id
        self.href = href
        self.html_string = html_string
        self._resource_resolver = resource_resolver
        self._id_resolver = id_resolver
        self._converter: MarkdownConverter | None = None
        self.html_objects: list[HtmlNode] | None = (
            self.to_html_objects() if expand else None
        )

    def __repr__(self) -> str:
        return f"Section(id={self.id!r}, href={self.href!r})"

    def register(self, converter: MarkdownConverter) -> None:
        """Use ``converter`` instead of the default HTML to Markdown conversion."""
        self._converter = converter

    def to_markdown(self) -> str:
        if self._converter is not None:
            return self._converter(self.html_string)
        return html_to_markdown(self.html_string)

    def to_text(self) -> str:
        return html_to_text(self.html_string)

    def to_html_objects(self) -> list[HtmlNode]:
        """Body markup as generic objects, with internal references expanded.

        Internal links become ``#<section id>,<fragment>``; internal images
        are inlined as data URIs.
        """
        soup = parse_html(self.html_string)
        body = soup.body or soup
        return self._convert_children(body)

    def _convert_children(self, node: Tag) -> list[HtmlNode]:
        converted = []
        for child in node.children:
            html_node = self._convert(child)
            if html_node is not None:
                converted.append(html_node)
        return converted

    def _convert(self, node) -> HtmlNode | None:
        if isinstance(node, NavigableString):
            if isinstance(node, _SKIPPED_STRINGS) or not node.strip():
                return None
            return HtmlNode(type="text", text=str(node))
        if not isinstance(node, Tag):
            return None

        attrs = {
            key: " ".join(value) if isinstance(value, list) else value
            for key, value in node.attrs.items()
        }
        if "href" in attrs:
            attrs["href"] = self._resolve_href(attrs["href"])
        if node.name in ("img", "image"):
            for key in ("src", "xlink:href"):
                if key in attrs:
                    attrs[key] = self._resolve_src(attrs[key])

        return HtmlNode(
            type="element",
            tag=node.name,
            attrs=attrs,
            children=self._convert_children(node),
        )

    def _resolve_href(self, href: str) -> str:
        if not is_internal_uri(href) or self._id_resolver is None:
            return href
        link = parse_link(href)
        section_id = self.id if not link.path else self._id_resolver(href)
        return f"#{section_id},{link.hash}"

    def _resolve_src(self, src: str) -> str:
        if not is_internal_uri(src) or self._resource_resolver is None:
            return src
        entry = self._resource_resolver(join_href(self.href, parse_link(src).path))
        mime_type = mimetypes.guess_type(entry.path)[0] or "application/octet-stream"
        encoded = base64.b64encode(entry.data).decode("ascii")
        return f"data:{mime_type};base64,{encoded}"


def build_section(
    id: str,
    html_string: str,
    resource_resolver: ResourceResolver | None = None,
    id_resolver: IdResolver | None = None,
    expand: bool = False,
    href: str = "",
) -> Section:
    """Create a Section for one content document."""
    return Section(
        id=id,
        html_string=html_string,
        href=href,
        resource_resolver=resource_resolver,
        id_resolver=id_resolver,
        expand=expand,
    )
