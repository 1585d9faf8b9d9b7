"""``backupwarden locate``: list backups newest first."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from backupwarden.cli.commands._common import locate_or_exit
from backupwarden.cli.render import artifact_table
from backupwarden.config import config
from backupwarden.models.results import OverallResult

console = Console()


def locate_cmd(
    directory: Path = typer.Argument(
        config.backup_dir,
        help="Directory holding the local backups.",
    ),
    pattern: str = typer.Option(
        config.pattern,
        "--pattern",
        "-p",
        help="Shell glob matched against file names.",
    ),
    select_all: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="List every matching backup instead of only the newest.",
    ),
) -> None:
    """Show the newest backup (or all of them) matching PATTERN in DIRECTORY."""
    artifacts = locate_or_exit(console, directory, pattern, select_all)
    if not artifacts:
        console.print(
            f"[bold yellow]No backups matching {pattern!r} in {directory}.[/bold yellow]"
        )
        raise typer.Exit(code=OverallResult.NO_ARTIFACTS.exit_code)

    console.print(artifact_table(artifacts, title=f"Backups in {directory}"))
