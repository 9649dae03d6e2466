"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from epubkit.commands.export import execute_export
from epubkit.commands.info import execute_info, execute_toc

app = typer.Typer(
    name="epubkit",
    help="Inspect EPUB files and export their sections.",
    add_completion=False,
)

console = Console()

BookPath = Annotated[
    Path,
    typer.Argument(
        help="Path to the EPUB file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug logging",
        ),
    ] = False,
) -> None:
    """Inspect EPUB files and export their sections."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()
def info(book_path: BookPath) -> None:
    """Display book metadata and structure summary."""
    try:
        execute_info(book_path, console=console)
    except Exception as e:
        console.print(f"[red]Error reading file: {escape(str(e))}[/]")
        raise typer.Exit(1)


@app.command()
def toc(book_path: BookPath) -> None:
    """Display the table of contents."""
    try:
        execute_toc(book_path, console=console)
    except Exception as e:
        console.print(f"[red]Error reading file: {escape(str(e))}[/]")
        raise typer.Exit(1)


@app.command()
def export(
    book_path: BookPath,
    output_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--output-dir",
            "-o",
            help="Output directory (default: {book_name}_sections/)",
        ),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format: markdown or text",
        ),
    ] = "markdown",
    expand: Annotated[
        bool,
        typer.Option(
            "--expand",
            help="Rewrite internal links and inline images while parsing",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress progress output",
        ),
    ] = False,
) -> None:
    """Export every section of the reading order to files."""
    if output_format not in ("markdown", "text"):
        console.print(f"[red]Invalid format: {escape(output_format)}. Use markdown or text.[/]")
        raise typer.Exit(1)

    try:
        execute_export(
            book_path=book_path,
            output_dir=output_dir,
            output_format=output_format,  # type: ignore
            expand=expand,
            quiet=quiet,
            console=console,
        )
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
