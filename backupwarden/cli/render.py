"""Rich renderables for verification and retention results.

Color scheme
------------
- green   : matched
- cyan    : record created
- yellow  : format probe failed
- red     : mismatched / unreadable
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from backupwarden.models.artifacts import Artifact
from backupwarden.models.results import (
    BatchReport,
    OverallResult,
    PruneReport,
    VerificationOutcome,
    VerificationStep,
)

_OUTCOME_LABELS: dict[VerificationOutcome, str] = {
    VerificationOutcome.MATCHED: "[green]MATCHED[/green]",
    VerificationOutcome.RECORD_CREATED: "[cyan]RECORD CREATED[/cyan]",
    VerificationOutcome.FORMAT_PROBE_FAILED: "[yellow]PROBE FAILED[/yellow]",
    VerificationOutcome.MISMATCHED: "[bold red]MISMATCHED[/bold red]",
}

_RESULT_STYLES: dict[OverallResult, tuple[str, str]] = {
    OverallResult.HEALTHY: ("All backups verified.", "green"),
    OverallResult.RECORDS_INITIALIZED: ("Digest records initialized.", "cyan"),
    OverallResult.FORMAT_FAILURE: ("Format probe failed.", "yellow"),
    OverallResult.INTEGRITY_FAILURE: ("Integrity mismatch detected.", "red"),
    OverallResult.NO_ARTIFACTS: ("No backups found.", "yellow"),
}


def _short(digest: str | None) -> str:
    return f"{digest[:16]}..." if digest else "[dim]-[/dim]"


def artifact_table(artifacts: list[Artifact], title: str = "Backups") -> Table:
    table = Table(title=title, header_style="bold cyan")
    table.add_column("Name", style="cyan")
    table.add_column("Modified (UTC)")
    table.add_column("Size", justify="right")
    for a in artifacts:
        table.add_row(a.name, a.modified_at.strftime("%Y-%m-%d %H:%M:%S"), f"{a.size_bytes:,}")
    return table


def print_batch(console: Console, report: BatchReport) -> None:
    """Per-artifact detail table followed by the overall verdict."""
    message, style = _RESULT_STYLES[report.result]

    if report.verifications:
        table = Table(header_style="bold cyan", expand=True)
        table.add_column("Artifact", style="cyan")
        table.add_column("Outcome", justify="center")
        table.add_column("Stored")
        table.add_column("Computed")
        table.add_column("Detail")
        for v in report.verifications:
            if v.failed_step == VerificationStep.IO:
                label = "[bold red]UNREADABLE[/bold red]"
            else:
                label = _OUTCOME_LABELS[v.outcome]
            table.add_row(
                v.artifact.name,
                label,
                _short(v.stored_digest),
                _short(v.computed_digest),
                v.error or "",
            )
        body: Any = table
    else:
        body = "[dim]Nothing matched the pattern.[/dim]"

    console.print(
        Panel(
            body,
            title="[bold]Backup Verification[/bold]",
            subtitle=f"[bold {style}]{message}[/bold {style}] (exit {report.exit_code})",
            border_style=style,
        )
    )
    if report.error_count:
        console.print(
            f"[bold red]{report.error_count} backup(s) could not be read.[/bold red]"
        )


def batch_payload(report: BatchReport) -> dict[str, Any]:
    """JSON-ready form of a BatchReport, including the exit code."""
    payload = report.model_dump(mode="json")
    payload["exit_code"] = report.exit_code
    return payload


def print_prune(console: Console, report: PruneReport) -> None:
    if report.attempted == 0:
        console.print(f"[dim]Nothing to prune (keep={report.keep_count}).[/dim]")
        return
    console.print(
        f"Pruned [bold]{report.removed}[/bold] of {report.attempted} "
        f"old backup(s), keeping {report.keep_count}."
    )
    for failure in report.failures:
        console.print(f"  [red]- {failure.path}: {failure.error}[/red]")
