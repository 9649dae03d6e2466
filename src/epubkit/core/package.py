"""Locate and parse the OPF package document."""

import logging
import posixpath
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from epubkit.core.archive import ArchiveAccessor
from epubkit.core.markup import find_all_path, find_path, parse_xml
from epubkit.errors import PackageDocumentError
from epubkit.models.epub import ManifestItem

log = logging.getLogger(__name__)

CONTAINER_PATH = "/META-INF/container.xml"
OPF_MEDIA_TYPE = "application/oebps-package+xml"
NCX_MEDIA_TYPE = "application/x-dtbncx+xml"


@dataclass
class PackageDocument:
    """Parsed contents of the package document."""

    path: str
    root: str
    manifest: list[ManifestItem]
    spine: dict[str, int]
    metadata: Tag | None = None
    navigation: ManifestItem | None = None


def determine_root(opf_path: str) -> str:
    """Content root for a package document path ("" at archive root)."""
    directory = posixpath.dirname(opf_path)
    return f"{directory}/" if directory else ""


def find_package_path(archive: ArchiveAccessor) -> str:
    """Read META-INF/container.xml and return the package document path."""
    container = parse_xml(archive.resolve(CONTAINER_PATH).data)
    rootfiles = find_all_path(container, "container", "rootfiles", "rootfile")
    preferred = [r for r in rootfiles if r.get("media-type") == OPF_MEDIA_TYPE]
    for rootfile in preferred or rootfiles:
        full_path = (rootfile.get("full-path") or "").strip()
        if full_path:
            return full_path
    raise PackageDocumentError("container.xml declares no package document path")


def parse_manifest(package: Tag) -> list[ManifestItem]:
    """Manifest items in declaration order, skipping incomplete or repeated ids."""
    items: list[ManifestItem] = []
    seen: set[str] = set()
    for item in find_all_path(package, "manifest", "item"):
        item_id = item.get("id")
        href = item.get("href")
        if not item_id or href is None:
            log.warning("Skipping manifest item without id/href: %s", item)
            continue
        if item_id in seen:
            log.warning("Duplicate manifest id %r ignored", item_id)
            continue
        seen.add(item_id)
        items.append(
            ManifestItem(
                id=item_id,
                href=href,
                media_type=item.get("media-type"),
                properties=(item.get("properties") or "").split(),
            )
        )
    return items


def parse_spine(package: Tag, manifest: list[ManifestItem]) -> dict[str, int]:
    """Map spine idrefs to reading-order indices.

    Repeated idrefs keep their first position and idrefs missing from the
    manifest are dropped, so indices always run 0..n-1.
    """
    known_ids = {item.id for item in manifest}
    spine: dict[str, int] = {}
    for itemref in find_all_path(package, "spine", "itemref"):
        idref = itemref.get("idref")
        if not idref or idref in spine:
            continue
        if idref not in known_ids:
            log.warning("Spine references unknown manifest id %r", idref)
            continue
        spine[idref] = len(spine)
    return spine


def find_navigation_item(
    manifest: list[ManifestItem], spine_toc: str | None
) -> ManifestItem | None:
    """Pick the manifest item holding the table of contents."""
    by_id = {item.id: item for item in manifest}
    if spine_toc and spine_toc in by_id:
        return by_id[spine_toc]
    if "ncx" in by_id:
        return by_id["ncx"]
    for item in manifest:
        if item.media_type == NCX_MEDIA_TYPE:
            return item
    for item in manifest:
        if "nav" in item.properties:
            return item
    return None


def read_package(archive: ArchiveAccessor) -> PackageDocument:
    """Locate and parse the package document.

    Raises:
        EntryNotFoundError: If container.xml or the package document is missing
        PackageDocumentError: If no package path is declared or the package
            document has no <package> root
    """
    opf_path = find_package_path(archive)
    log.debug("Package document at %s", opf_path)

    soup: BeautifulSoup = parse_xml(archive.resolve("/" + opf_path).data)
    package = find_path(soup, "package")
    if package is None:
        raise PackageDocumentError(f"{opf_path} is not a package document")

    manifest = parse_manifest(package)
    spine_tag = find_path(package, "spine")
    spine_toc = spine_tag.get("toc") if spine_tag is not None else None

    return PackageDocument(
        path=opf_path,
        root=determine_root(opf_path),
        manifest=manifest,
        spine=parse_spine(package, manifest),
        metadata=find_path(package, "metadata"),
        navigation=find_navigation_item(manifest, spine_toc),
    )
