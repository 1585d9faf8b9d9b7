"""``backupwarden fetch``: download the newest remote backup, verify, prune.

The downloader flow:
  1. list the remote backup directory over ssh and scp the newest file
     (and the producer's .sha256 sidecar, if there is one);
  2. verify it locally;
  3. if it verified (healthy or record initialized), prune the local set.

Exit codes: those of ``verify``, plus 7 when the remote directory has no
matching backup, 8 when ssh/scp failed, and 1 when pruning failed after an
otherwise healthy run.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console

from backupwarden.cli.commands._common import EXIT_IO_FAILURE, locate_or_exit
from backupwarden.cli.render import batch_payload, print_batch, print_prune
from backupwarden.config import config
from backupwarden.core.errors import RemoteArtifactNotFoundError, RemoteTransferError
from backupwarden.core.pruner import RetentionPruner
from backupwarden.core.verifier import IntegrityVerifier
from backupwarden.models.results import OverallResult
from backupwarden.remote.transfer import RemoteSession, RemoteTransfer

console = Console()

EXIT_REMOTE_NOT_FOUND = 7
EXIT_TRANSFER_FAILED = 8

_PRUNABLE_RESULTS = {OverallResult.HEALTHY, OverallResult.RECORDS_INITIALIZED}


def build_transfer(
    host: str, user: str, port: int, identity_file: Path | None
) -> RemoteTransfer:
    session = RemoteSession(
        host=host,
        user=user,
        port=port,
        identity_file=identity_file,
        ssh_binary=config.ssh_binary,
        scp_binary=config.scp_binary,
        connect_timeout=config.connect_timeout,
    )
    return RemoteTransfer(
        session,
        timeout=config.transfer_timeout,
        digest_suffix=config.digest_suffix,
    )


def fetch_cmd(
    host: str = typer.Option(
        config.remote_host,
        "--host",
        "-H",
        help="VPS host name or address.",
    ),
    user: str = typer.Option(config.remote_user, "--user", "-u", help="SSH user."),
    port: int = typer.Option(config.remote_port, "--port", help="SSH port."),
    identity_file: Path = typer.Option(
        config.identity_file,
        "--identity",
        "-i",
        help="SSH private key.",
    ),
    remote_dir: str = typer.Option(
        config.remote_dir,
        "--remote-dir",
        "-r",
        help="Backup directory on the VPS.",
    ),
    pattern: str = typer.Option(
        config.pattern,
        "--pattern",
        "-p",
        help="Shell glob matched against file names.",
    ),
    dest: Path = typer.Option(
        config.backup_dir,
        "--dest",
        "-d",
        help="Local directory receiving the backup.",
    ),
    keep: int = typer.Option(
        config.keep_count,
        "--keep",
        "-k",
        help="Number of newest local backups to keep (0 disables pruning).",
    ),
    probe: bool = typer.Option(
        config.probe_format,
        "--probe/--no-probe",
        help="Also check that the backup opens as a gzip stream.",
    ),
    fetch_digest: bool = typer.Option(
        True,
        "--fetch-digest/--no-fetch-digest",
        help="Copy the remote .sha256 sidecar when the VPS provides one.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the verification detail as JSON.",
    ),
) -> None:
    """Fetch the newest backup from the VPS, verify it and prune old copies."""
    if not host:
        raise typer.BadParameter(
            "no host given (use --host or BACKUPWARDEN_REMOTE_HOST)", param_hint="--host"
        )

    transfer = build_transfer(host, user, port, identity_file)
    try:
        artifact = transfer.fetch_latest_artifact(
            remote_dir, pattern, dest, fetch_digest=fetch_digest
        )
    except RemoteArtifactNotFoundError as exc:
        console.print(f"[bold yellow]No backup on remote:[/bold yellow] {exc}")
        raise typer.Exit(code=EXIT_REMOTE_NOT_FOUND)
    except RemoteTransferError as exc:
        console.print(f"[bold red]Transfer failed:[/bold red] {exc}")
        raise typer.Exit(code=EXIT_TRANSFER_FAILED)

    verifier = IntegrityVerifier(
        digest_suffix=config.digest_suffix,
        probe_bytes=config.probe_bytes,
        chunk_size=config.chunk_size,
    )
    report = verifier.verify_all([artifact], probe_format=probe)
    if as_json:
        typer.echo(json.dumps(batch_payload(report), indent=2))
    else:
        print_batch(console, report)

    exit_code = report.exit_code
    if report.result not in _PRUNABLE_RESULTS:
        if not as_json:
            console.print("[yellow]Skipping pruning: fetched backup did not verify.[/yellow]")
        raise typer.Exit(code=exit_code)

    retention_set = locate_or_exit(console, dest, pattern, select_all=True)
    prune_report = RetentionPruner(digest_suffix=config.digest_suffix).prune(retention_set, keep)
    if not as_json:
        print_prune(console, prune_report)
    if not prune_report.ok and exit_code == 0:
        exit_code = EXIT_IO_FAILURE
    raise typer.Exit(code=exit_code)
