"""Markup parsing and optional-path access over BeautifulSoup trees."""

import warnings

from bs4 import BeautifulSoup, Tag, XMLParsedAsHTMLWarning

# EPUB content documents are XHTML; parsing them as HTML is intended
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)


def parse_xml(text: str | bytes) -> BeautifulSoup:
    """Parse an XML document (container, OPF, NCX, nav)."""
    return BeautifulSoup(text, "xml")


def parse_html(text: str | bytes) -> BeautifulSoup:
    """Parse an (X)HTML content document."""
    return BeautifulSoup(text, "lxml")


def find_path(node: Tag | None, *names: str) -> Tag | None:
    """Follow direct child elements by name, returning None on any miss.

    ``find_path(soup, "container", "rootfiles", "rootfile")`` is the first
    ``rootfile`` under the first ``rootfiles`` under ``container``.
    """
    for name in names:
        if node is None:
            return None
        node = node.find(name, recursive=False)
    return node


def find_all_path(node: Tag | None, *names: str) -> list[Tag]:
    """Like find_path, but return every element matching the last name.

    A single matching element and several matching elements both come back
    as a list.
    """
    if not names:
        return []
    parent = find_path(node, *names[:-1])
    if parent is None:
        return []
    return parent.find_all(names[-1], recursive=False)


def text_of(node: Tag | None, default: str | None = None) -> str | None:
    """Stripped text content of an element, or ``default`` if absent/empty."""
    if node is None:
        return default
    text = node.get_text().strip()
    return text or default
