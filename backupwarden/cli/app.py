"""Main Typer application: imports and registers all CLI commands.

Entry point: ``backupwarden`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from backupwarden.cli.commands.fetch_cmd import fetch_cmd
from backupwarden.cli.commands.locate_cmd import locate_cmd
from backupwarden.cli.commands.prune_cmd import prune_cmd
from backupwarden.cli.commands.verify_cmd import verify_cmd
from backupwarden.config import config

app = typer.Typer(
    name="backupwarden",
    help="Backupwarden: verify and retain nightly database backups.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="locate", help="Show the newest (or all) local backups.")(locate_cmd)
app.command(name="verify", help="Verify backups against their .sha256 records.")(verify_cmd)
app.command(name="prune", help="Delete all but the newest N backups.")(prune_cmd)
app.command(name="fetch", help="Download the newest backup from the VPS, verify, prune.")(fetch_cmd)


def configure_logging(level: str) -> None:
    """Send log records to stderr through Rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        config.log_level,
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    ),
) -> None:
    """Backupwarden: verify and retain nightly database backups."""
    configure_logging(log_level)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
