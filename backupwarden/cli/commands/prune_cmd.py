"""``backupwarden prune``: trim the local retention set."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from backupwarden.cli.commands._common import EXIT_IO_FAILURE, locate_or_exit
from backupwarden.cli.render import print_prune
from backupwarden.config import config
from backupwarden.core.pruner import RetentionPruner

console = Console()


def prune_cmd(
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
    keep: int = typer.Option(
        config.keep_count,
        "--keep",
        "-k",
        help="Number of newest backups to keep (0 disables pruning).",
    ),
) -> None:
    """Delete all but the KEEP newest backups, together with their records."""
    retention_set = locate_or_exit(console, directory, pattern, select_all=True)
    report = RetentionPruner(digest_suffix=config.digest_suffix).prune(retention_set, keep)
    print_prune(console, report)
    if not report.ok:
        raise typer.Exit(code=EXIT_IO_FAILURE)
