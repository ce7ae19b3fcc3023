"""CLI command for checking the external storage configuration.

Usage:
    extstore check
    extstore check --format json
"""

from __future__ import annotations

import json

import typer
from rich.console import Console
from rich.table import Table

from extstore.config import Settings
from extstore.storage.facade import StorageState
from extstore.storage.factory import build_external_storage


def check(
    output_format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: text, json",
    ),
) -> None:
    """Initialize the configured backend and report its state.

    Exits with code 1 when a backend is configured but failed to initialize.
    """
    console = Console()
    storage = build_external_storage(Settings().external_storage_options())
    details = storage.describe()

    if output_format == "json":
        typer.echo(json.dumps(details, indent=2))
    else:
        table = Table(title="External storage")
        table.add_column("Setting", style="cyan")
        table.add_column("Value")
        table.add_row("state", storage.state.value)
        table.add_row("write", "enabled" if storage.write else "disabled")
        for name, value in (details.get("backend") or {}).items():
            table.add_row(name, "" if value is None else str(value))
        if storage.reason:
            table.add_row("reason", f"[red]{storage.reason}[/red]")
        console.print(table)

    if storage.state is StorageState.FAILED:
        raise typer.Exit(code=1)
