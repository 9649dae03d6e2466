"""Resolve authored hrefs to manifest item ids."""

import posixpath
from dataclasses import dataclass
from urllib.parse import unquote

from epubkit.models.epub import ManifestItem


@dataclass(frozen=True)
class Link:
    """An href split into its parts."""

    path: str  # href without the fragment
    name: str  # URI-decoded base name of path
    hash: str  # fragment without "#", "" when absent


def parse_link(href: str) -> Link:
    """Split ``href`` into path, base name and fragment."""
    path, _, fragment = href.partition("#")
    name = posixpath.basename(unquote(path))
    return Link(path=path, name=name, hash=fragment)


class LinkResolver:
    """Map hrefs to manifest ids by comparing base names.

    TOC and content links may be root-relative, content-root-relative or
    bare file names, with or without a fragment. Manifest hrefs are always
    content-root-relative, so only the file name is compared.
    """

    def __init__(self, manifest: list[ManifestItem]):
        self._ids_by_name: dict[str, str] = {}
        for item in manifest:
            # first item with a given name wins
            self._ids_by_name.setdefault(parse_link(item.href).name, item.id)

    def resolve_id(self, href: str) -> str:
        """Return the manifest id ``href`` points at, or "" if none matches."""
        name = parse_link(href).name
        if not name:
            return ""
        return self._ids_by_name.get(name, "")
