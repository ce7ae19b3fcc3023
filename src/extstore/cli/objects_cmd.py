"""CLI commands for storing and fetching objects.

Usage:
    extstore key report.pdf
    extstore put report.pdf
    extstore get <key> -o report.pdf
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from extstore.config import Settings
from extstore.errors import ExternalStorageError
from extstore.storage.facade import ExternalStorage
from extstore.storage.factory import build_external_storage

err_console = Console(stderr=True)


def _load_storage() -> ExternalStorage:
    return build_external_storage(Settings().external_storage_options())


def _read_file(path: Path) -> bytes:
    if not path.is_file():
        err_console.print(f"[red]File not found:[/red] {path}")
        raise typer.Exit(code=1)
    return path.read_bytes()


def key(
    path: Path = typer.Argument(..., help="File to compute the content key of"),
) -> None:
    """Print the content key of a file without storing it."""
    typer.echo(ExternalStorage.content_key(_read_file(path)))


def put(
    path: Path = typer.Argument(..., help="File to store"),
) -> None:
    """Store a file in external storage and print its content key."""
    content = _read_file(path)
    storage = _load_storage()
    try:
        content_key = storage.store(content)
    except ExternalStorageError as exc:
        err_console.print(f"[red]Store failed:[/red] {exc.message}")
        raise typer.Exit(code=1) from exc
    typer.echo(content_key)


def get(
    content_key: str = typer.Argument(..., metavar="KEY", help="Content key to fetch"),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write content to this file instead of stdout",
    ),
) -> None:
    """Fetch content from external storage by content key."""
    storage = _load_storage()
    try:
        content = storage.get(content_key)
    except ExternalStorageError as exc:
        err_console.print(f"[red]Fetch failed:[/red] {exc.message}")
        raise typer.Exit(code=1) from exc

    if output is not None:
        output.write_bytes(content)
        err_console.print(f"[green]Wrote {len(content)} bytes to[/green] {output}")
    else:
        typer.echo(content, nl=False)
