"""CLI commands for extstore.

Provides command-line interface using Typer:
- extstore check: Initialize the configured backend and report its state
- extstore key: Print the content key of a file
- extstore put: Store a file in external storage
- extstore get: Fetch content by key

Configuration comes from EXTSTORE_* environment variables (or .env).

Usage:
    extstore --help
    extstore check
    extstore put report.pdf
    extstore get 9f86d081... -o report.pdf
"""

import typer

from extstore.cli.check_cmd import check
from extstore.cli.objects_cmd import get, key, put
from extstore.config import Settings
from extstore.observability.logging import configure_logging

# Main CLI application
app = typer.Typer(
    name="extstore",
    help="extstore: external attachment storage",
    no_args_is_help=True,
)

app.command("check")(check)
app.command("key")(key)
app.command("put")(put)
app.command("get")(get)


@app.callback()
def callback(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level: debug, info, warning, error",
    ),
    log_format: str | None = typer.Option(
        None,
        "--log-format",
        help="Log format: json, console",
    ),
) -> None:
    """extstore: external attachment storage."""
    app_settings = Settings()
    configure_logging(
        json_format=app_settings.log_json if log_format is None else log_format == "json",
        level=log_level or app_settings.log_level,
    )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
