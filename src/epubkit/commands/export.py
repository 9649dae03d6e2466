"""Export command implementation."""

import logging
import posixpath
import re
from pathlib import Path
from typing import Callable, Literal

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from epubkit.core.epub_parser import EpubDocument, parse_epub
from epubkit.core.links import parse_link
from epubkit.core.section import Section, is_internal_uri, join_href
from epubkit.errors import EntryNotFoundError
from epubkit.models.epub import OutlineNode
from epubkit.models.output import BookOutput, SectionOutput

log = logging.getLogger(__name__)

IMAGE_DIR = "images"
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg")

# [text](url) or ![alt](url), with an optional "title" after the url
_IMAGE_LINK = re.compile(r'!\[(.*?)\]\((\S+?)((?:\s+"[^"]*")?)\)')
_TEXT_LINK = re.compile(r'(?<!!)\[(.*?)\]\((\S+?)((?:\s+"[^"]*")?)\)')

UrlRewriter = Callable[[str], str]


def get_clear_filename(name: str, ext: str = "") -> str:
    """Filesystem-safe file name from a title."""
    clean = re.sub(r'[\\/:*?"<>|\x00-\x1f]', "", name).strip()
    clean = re.sub(r"\s+", "_", clean)
    return (clean or "untitled") + ext


def get_section_filename(index: int, title: str, ext: str) -> str:
    """Numbered file name that keeps exported sections in reading order."""
    return f"{index + 1:03d}_{get_clear_filename(title, ext)}"


def get_default_output_dir(book_path: Path) -> Path:
    """Get default output directory based on book filename."""
    clean_stem = re.sub(r"[^\w\s-]", "", book_path.stem).strip()
    clean_stem = re.sub(r"[-\s]+", "_", clean_stem)
    return book_path.parent / f"{clean_stem}_sections"


def collect_section_titles(
    nodes: list[OutlineNode], titles: dict[str, str] | None = None
) -> dict[str, str]:
    """Map section ids to the first TOC name that points at them."""
    if titles is None:
        titles = {}
    for node in nodes:
        if node.section_id and node.name and node.section_id not in titles:
            titles[node.section_id] = node.name
        if node.children:
            collect_section_titles(node.children, titles)
    return titles


def fix_link_paths(
    markdown: str, rewrite_link: UrlRewriter, rewrite_image: UrlRewriter
) -> str:
    """Rewrite the urls of Markdown images, then of plain links."""
    markdown = _IMAGE_LINK.sub(
        lambda m: f"![{m[1]}]({rewrite_image(m[2])}{m[3]})", markdown
    )
    return _TEXT_LINK.sub(
        lambda m: f"[{m[1]}]({rewrite_link(m[2])}{m[3]})", markdown
    )


class ExportLinkRewriter:
    """Point section links at exported files and copy referenced images.

    ``filenames`` maps section ids to their exported file names. Images are
    copied once into ``output_dir / IMAGE_DIR``; later references reuse the
    first copy.
    """

    def __init__(self, book: EpubDocument, filenames: dict[str, str], output_dir: Path):
        self.book = book
        self.filenames = filenames
        self.output_dir = output_dir
        self._images: dict[str, str] = {}

    def rewrite(self, section: Section, markdown: str) -> str:
        return fix_link_paths(
            markdown,
            rewrite_link=self.link_url,
            rewrite_image=lambda url: self.image_url(section, url),
        )

    def link_url(self, url: str) -> str:
        if not is_internal_uri(url):
            return url
        link = parse_link(url)
        if not link.path:
            return url
        filename = self.filenames.get(self.book.get_item_id(url))
        if filename is None:
            log.debug("Link %s points outside the exported sections", url)
            return url
        return f"{filename}#{link.hash}" if link.hash else filename

    def image_url(self, section: Section, url: str) -> str:
        if not is_internal_uri(url):
            return url
        path = join_href(section.href, parse_link(url).path)
        if not path.lower().endswith(IMAGE_EXTENSIONS):
            return url
        if path not in self._images:
            try:
                entry = self.book.resolve(path)
            except EntryNotFoundError:
                log.warning("Image %s referenced by %s is missing", path, section.href)
                return url
            self._images[path] = self._copy_image(path, entry.data)
        return f"{IMAGE_DIR}/{self._images[path]}"

    def _copy_image(self, path: str, data: bytes) -> str:
        stem, ext = posixpath.splitext(posixpath.basename(path))
        name = get_clear_filename(stem, ext)
        taken = set(self._images.values())
        counter = 1
        while name in taken:
            counter += 1
            name = get_clear_filename(f"{stem}_{counter}", ext)
        image_dir = self.output_dir / IMAGE_DIR
        image_dir.mkdir(exist_ok=True)
        (image_dir / name).write_bytes(data)
        return name


def execute_export(
    book_path: Path,
    output_dir: Path | None,
    output_format: Literal["markdown", "text"],
    expand: bool,
    quiet: bool,
    console: Console,
) -> Path:
    """Write every spine section to ``output_dir``; returns the manifest path."""
    output_dir = output_dir or get_default_output_dir(book_path)
    output_dir.mkdir(parents=True, exist_ok=True)
    ext = ".md" if output_format == "markdown" else ".txt"

    with parse_epub(book_path, expand=expand) as book:
        titles = collect_section_titles(book.table_of_contents or [])
        filenames = {
            section.id: get_section_filename(
                index, titles.get(section.id, section.id), ext
            )
            for index, section in enumerate(book.sections)
        }
        rewriter = ExportLinkRewriter(book, filenames, output_dir)
        outputs: list[SectionOutput] = []

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            disable=quiet,
        ) as progress:
            task = progress.add_task("Exporting sections...", total=len(book.sections))
            for index, section in enumerate(book.sections):
                title = titles.get(section.id, section.id)
                if output_format == "markdown":
                    content = rewriter.rewrite(section, section.to_markdown())
                else:
                    content = section.to_text()

                filename = filenames[section.id]
                (output_dir / filename).write_text(content, encoding="utf-8")
                outputs.append(
                    SectionOutput(
                        index=index,
                        section_id=section.id,
                        title=title,
                        source_file=section.href,
                        output_file=filename,
                        word_count=len(content.split()),
                    )
                )
                progress.advance(task)

        manifest = BookOutput(
            source_path=str(book_path),
            info=book.info,
            table_of_contents=book.table_of_contents,
            navigation_file_path=book.navigation_file_path,
            sections=outputs,
            format=output_format,
        )

    manifest_path = output_dir / "book.json"
    manifest_path.write_text(
        manifest.model_dump_json(indent=2, exclude_none=True), encoding="utf-8"
    )
    if not quiet:
        console.print(
            f"[green]Exported {len(outputs)} section(s) to {output_dir}[/]"
        )
    return manifest_path
