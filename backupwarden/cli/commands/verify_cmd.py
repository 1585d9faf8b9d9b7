"""``backupwarden verify``: check backups against their digest records.

Exit codes: 0 healthy, 3 records initialized, 4 integrity mismatch,
5 format-probe failure (or unreadable file), 6 no backups found.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console

from backupwarden.cli.commands._common import locate_or_exit
from backupwarden.cli.render import batch_payload, print_batch
from backupwarden.config import config
from backupwarden.core.verifier import IntegrityVerifier

console = Console()


def verify_cmd(
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
        help="Verify every matching backup instead of only the newest.",
    ),
    probe: bool = typer.Option(
        config.probe_format,
        "--probe/--no-probe",
        help="Also check that the backup opens as a gzip stream.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the per-backup detail as JSON.",
    ),
) -> None:
    """Verify backups in DIRECTORY against their .sha256 records.

    A backup seen for the first time gets a new record (exit 3). An existing
    record is never rewritten; a disagreement is a mismatch (exit 4).
    """
    artifacts = locate_or_exit(console, directory, pattern, select_all)
    verifier = IntegrityVerifier(
        digest_suffix=config.digest_suffix,
        probe_bytes=config.probe_bytes,
        chunk_size=config.chunk_size,
    )
    report = verifier.verify_all(artifacts, probe_format=probe)

    if as_json:
        typer.echo(json.dumps(batch_payload(report), indent=2))
    else:
        print_batch(console, report)
    raise typer.Exit(code=report.exit_code)
