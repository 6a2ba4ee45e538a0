"""
Typer CLI for MarkdownDB.

``markdowndb build`` compiles a directory into a runtime or static artifact and
prints it (or writes it with ``--output``); ``markdowndb check`` only parses and
de-duplicates a directory so content can be validated before a build. Options
layer over ``MARKDOWNDB_*`` environment variables (CLI > ENV > defaults).
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer

from . import __version__
from .dispatch import compile_markdown_db
from .emit import OutputFormat, emit, write_output
from .errors import MarkdownDBError, format_error
from .identity import canonical_timestamp
from .ingest import ingest_directory
from .logging import get_logger
from .settings import load_settings

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
    help="[bold]MarkdownDB[/bold] — Compile a directory of markdown documents into an embeddable dataset.",
)

__all__ = ["app", "main"]


def _version_callback(value: bool) -> None:
    """Print the package version and exit when ``--version`` is passed."""

    if value:
        typer.echo(f"MarkdownDB {__version__}")
        raise typer.Exit()


@app.callback()
def root_callback(
    ctx: typer.Context,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Logging level (DEBUG|INFO|WARNING|ERROR)"),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the MarkdownDB version and exit.",
        ),
    ] = False,
) -> None:
    """Load settings and configure logging for every subcommand."""

    try:
        settings = load_settings(log_level=log_level)
    except MarkdownDBError as exc:
        typer.secho(format_error(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)
    get_logger(level=settings.log_level)
    ctx.obj = settings


@app.command("build")
def build(
    ctx: typer.Context,
    directory: Annotated[Path, typer.Argument(help="Directory of markdown documents")],
    mode: Annotated[
        Optional[str],
        typer.Option("--mode", "-m", help="Artifact mode: runtime (inline) or static (files + indices)"),
    ] = None,
    public_dir: Annotated[
        Optional[Path],
        typer.Option("--public-dir", help="Output directory for static <id>.html files"),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the emitted artifact here instead of stdout"),
    ] = None,
    fmt: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Emitted encoding"),
    ] = OutputFormat.JSON,
    indent: Annotated[
        Optional[int], typer.Option("--indent", help="JSON indentation")
    ] = None,
) -> None:
    """
    Compile DIRECTORY into an embeddable artifact.

    [bold yellow]Examples:[/bold yellow]

    [cyan]markdowndb build posts/[/cyan]
    Emit every post inline as JSON

    [cyan]markdowndb build posts/ --mode static --public-dir public/posts -f module -o src/posts.js[/cyan]
    Write posts to public/posts/<id>.html and emit tag/time indices as an ES module
    """

    try:
        settings = load_settings(mode=mode, public_dir=public_dir, log_level=ctx.obj.log_level if ctx.obj else None)
        artifact = compile_markdown_db(str(directory), settings.mode, settings=settings)
        text = emit(artifact, fmt, indent=indent)
        if output is not None:
            write_output(text, output)
            typer.secho(f"✅ Wrote {fmt.value} artifact to {output}", fg=typer.colors.GREEN, err=True)
        else:
            typer.echo(text)
    except MarkdownDBError as exc:
        typer.secho(format_error(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)


@app.command("check")
def check(
    ctx: typer.Context,
    directory: Annotated[Path, typer.Argument(help="Directory of markdown documents")],
) -> None:
    """Parse DIRECTORY and report identifiers without building an artifact."""

    settings = ctx.obj or load_settings()
    try:
        corpus = ingest_directory(
            directory,
            sort_entries=settings.sort_entries,
            ignore=tuple(settings.ignore),
        )
    except MarkdownDBError as exc:
        typer.secho(format_error(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)

    for document in corpus:
        header = document.header
        typer.echo(f"{header.id}\t{canonical_timestamp(header.timestamp)}\t{header.title}")
    typer.secho(f"✅ {len(corpus)} documents OK in {corpus.directory}", fg=typer.colors.GREEN)


def main() -> None:
    """Console script entry point."""

    app()


if __name__ == "__main__":  # pragma: no cover
    main()
