"""Helpers shared by the CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from backupwarden.config import config
from backupwarden.core.errors import BackupWardenError
from backupwarden.core.locator import locate
from backupwarden.models.artifacts import Artifact

EXIT_IO_FAILURE = 1


def locate_or_exit(
    console: Console, directory: Path, pattern: str, select_all: bool
) -> list[Artifact]:
    """``locate`` with I/O failures reported and mapped to exit code 1."""
    try:
        return locate(directory, pattern, select_all, digest_suffix=config.digest_suffix)
    except BackupWardenError as exc:
        console.print(f"[bold red]Cannot read backups:[/bold red] {exc}")
        raise typer.Exit(code=EXIT_IO_FAILURE)
