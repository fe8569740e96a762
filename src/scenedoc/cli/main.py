"""CLI entry point for scenedoc.

Invoked as::

    scenedoc [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m scenedoc.cli.main

Commands
--------
validate        Check whether a file is a valid scene or library document
inspect         Dump a validated document as JSON or YAML
upgrade         Rewrite a scene file in place as a current-version document
merge-library   Merge library files into a single library.excalidrawlib
version         Show version information
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import anyio
import click
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from scenedoc.fs.local import FileSelector

console = Console()
err_console = Console(stderr=True)


def _read_json_or_exit(path: str) -> Any:
    """Read and decode a JSON file, exiting on error."""
    try:
        raw = Path(path).read_bytes()
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        err_console.print(f"[red]Invalid JSON[/red] in {path}: {exc}")
        sys.exit(1)


def _fixed_file(path: Path) -> "FileSelector":
    """Return a file selector that always picks ``path``."""
    return lambda options: path


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="scenedoc")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Versioned scene and library documents: validate, inspect, upgrade."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from scenedoc import __version__
    from scenedoc.document import LIBRARY_VERSION, SCENE_VERSION

    table = Table(show_header=False, box=None)
    table.add_row("[bold]scenedoc[/bold]", f"v{__version__}")
    table.add_row("Scene format", f"v{SCENE_VERSION}")
    table.add_row("Library format", f"v{LIBRARY_VERSION}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    console.print(table)


# ---------------------------------------------------------------------------
# validate command
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("file", type=click.Path(exists=False))
def validate_command(file: str) -> None:
    """Check whether FILE is a valid scene or library document.

    Exits with status 1 when the file is neither.
    """
    from scenedoc.document import LIBRARY_TYPE, SCENE_TYPE, detect_document_type

    candidate = _read_json_or_exit(file)
    kind = detect_document_type(candidate)

    if kind is None:
        console.print(f"[red]INVALID[/red] {file}: not a scene or library document")
        sys.exit(1)

    table = Table(title=f"Document: {file}", show_header=False)
    table.add_row("Kind", "scene" if kind == SCENE_TYPE else "library")
    table.add_row("Version", str(candidate.get("version", "-")))
    table.add_row("Source", str(candidate.get("source", "-")))
    if kind == SCENE_TYPE:
        table.add_row("Elements", str(len(candidate.get("elements") or [])))
    elif kind == LIBRARY_TYPE:
        table.add_row("Items", str(len(candidate.get("library") or [])))
    console.print(table)
    console.print(f"[green]OK[/green] {file}")


# ---------------------------------------------------------------------------
# inspect command
# ---------------------------------------------------------------------------


@cli.command(name="inspect")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Output format",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def inspect_command(file: str, output_format: str, output: str | None) -> None:
    """Validate FILE and dump the resulting document."""
    from scenedoc.document import SCENE_TYPE, detect_document_type
    from scenedoc.document.codec import LibraryDocumentCodec, SceneDocumentCodec

    candidate = _read_json_or_exit(file)
    kind = detect_document_type(candidate)
    if kind is None:
        err_console.print(f"[red]Error:[/red] {file} is not a scene or library document")
        sys.exit(1)

    codec = SceneDocumentCodec() if kind == SCENE_TYPE else LibraryDocumentCodec()
    document = codec.from_dict(candidate)

    if output_format == "json":
        text = json.dumps(document.to_dict(), indent=2, ensure_ascii=False)
        lang = "json"
    else:
        text = codec.to_yaml(document)
        lang = "yaml"

    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]Document written to[/green] {output}")
    else:
        console.print(Syntax(text, lang, line_numbers=True))


# ---------------------------------------------------------------------------
# upgrade command
# ---------------------------------------------------------------------------


async def _upgrade(path: Path, source: str | None) -> None:
    from scenedoc.config import ExportConfig
    from scenedoc.fs import LocalFileSystem
    from scenedoc.persistence import PersistenceOrchestrator

    config = ExportConfig(source=source) if source else ExportConfig.from_env()
    fs = LocalFileSystem(path.parent, select_file=_fixed_file(path))
    orchestrator = PersistenceOrchestrator(fs.open_file, fs.save_file, config=config)

    loaded = await orchestrator.load_scene({"name": path.stem})
    # The opened handle is read-only; saving asks for write access.
    await orchestrator.save_scene(loaded.elements, loaded.app_state)


@cli.command(name="upgrade")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--source", default=None, help="Override the source written into the document")
def upgrade_command(file: str, source: str | None) -> None:
    """Rewrite scene FILE in place as a current-version document.

    Deleted elements and non-exportable settings are dropped.
    """
    from scenedoc.errors import AbortError, InvalidDocumentError

    try:
        anyio.run(_upgrade, Path(file), source)
    except InvalidDocumentError:
        err_console.print(f"[red]Error:[/red] {file} is not a scene document")
        sys.exit(1)
    except AbortError:
        err_console.print(f"[yellow]Aborted:[/yellow] no write permission for {file}")
        sys.exit(1)
    console.print(f"[green]Upgraded[/green] {file}")


# ---------------------------------------------------------------------------
# merge-library command
# ---------------------------------------------------------------------------


async def _merge_libraries(sources: list[Path], output_dir: Path) -> tuple[int, Path]:
    from scenedoc.config import ExportConfig
    from scenedoc.document.loader import Library
    from scenedoc.fs import LocalFileSystem
    from scenedoc.persistence import PersistenceOrchestrator

    library = Library()
    added = 0
    for source in sources:
        fs = LocalFileSystem(output_dir, select_file=_fixed_file(source))
        orchestrator = PersistenceOrchestrator(
            fs.open_file, fs.save_file, config=ExportConfig.from_env()
        )
        added += await orchestrator.import_library(library)

    fs = LocalFileSystem(output_dir)
    orchestrator = PersistenceOrchestrator(
        fs.open_file, fs.save_file, config=ExportConfig.from_env()
    )
    handle = await orchestrator.save_library(library)
    return added, Path(handle.path)


@cli.command(name="merge-library")
@click.argument("sources", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output-dir",
    "-d",
    default=".",
    type=click.Path(file_okay=False),
    help="Directory to write library.excalidrawlib into",
)
def merge_library_command(sources: tuple[str, ...], output_dir: str) -> None:
    """Merge library SOURCES into one library file.

    An item already merged from an earlier source is skipped.  Repeats
    within a single source are kept as they are.
    """
    from scenedoc.errors import InvalidDocumentError

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    try:
        added, written = anyio.run(_merge_libraries, [Path(s) for s in sources], out)
    except InvalidDocumentError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)
    console.print(f"[green]Wrote[/green] {written} with [bold]{added}[/bold] item(s)")


if __name__ == "__main__":
    cli()
