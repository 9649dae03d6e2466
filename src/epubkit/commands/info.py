"""Info and toc command implementations."""

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.tree import Tree

from epubkit.core.epub_parser import parse_epub
from epubkit.models.epub import OutlineNode


def execute_info(book_path: Path, console: Console) -> None:
    """Print book metadata and structure summary."""
    with parse_epub(book_path) as book:
        info = book.info
        info_lines = [
            f"[bold]{escape(info.title or 'Unknown Title')}[/]",
            "",
            f"[dim]Author(s):[/] {escape(', '.join(info.author or []) or 'Unknown')}",
            f"[dim]Language:[/] {escape(info.language or 'Unknown')}",
            f"[dim]Publisher:[/] {escape(info.publisher or 'Unknown')}",
        ]
        if info.rights:
            info_lines.append(f"[dim]Rights:[/] {escape(info.rights)}")
        info_lines.append("")
        info_lines.append(f"[dim]Package:[/] {escape(book.package_path)}")
        info_lines.append(f"[dim]Manifest items:[/] {len(book.manifest)}")
        info_lines.append(f"[dim]Sections:[/] {len(book.sections)}")
        info_lines.append(
            f"[dim]Navigation:[/] {escape(book.navigation_file_path or 'none')}"
        )
        if info.description:
            info_lines.append("")
            info_lines.append(escape(info.description))

    console.print()
    console.print(
        Panel(
            "\n".join(info_lines),
            title="Book Information",
            border_style="green",
        )
    )
    console.print()


def add_outline(tree: Tree, nodes: list[OutlineNode]) -> None:
    """Recursively add outline nodes to a rich Tree."""
    for node in nodes:
        target = node.section_id or "[red]unresolved[/]"
        if node.node_id:
            target = f"{target}#{node.node_id}"
        branch = tree.add(f"{escape(node.name)} [dim]({target})[/]")
        if node.children:
            add_outline(branch, node.children)


def execute_toc(book_path: Path, console: Console) -> None:
    """Print the table of contents as a tree."""
    with parse_epub(book_path) as book:
        toc = book.table_of_contents
        title = book.info.title or book_path.name

    if toc is None:
        console.print("[yellow]This book has no navigation file[/]")
        return

    tree = Tree(f"[bold cyan]{escape(title)}[/]")
    add_outline(tree, toc)
    console.print(tree)
