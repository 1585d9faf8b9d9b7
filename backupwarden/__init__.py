"""Backupwarden: verify and retain nightly database backups pulled from a VPS.

The core is a small integrity and retention engine:
  - Artifact Locator: newest-first discovery of backup files by glob pattern
  - Integrity Verifier: SHA-256 against a ``.sha256`` sidecar (hash of record)
    plus an optional gzip container probe
  - Retention Pruner: keep the N newest artifacts, drop the rest and their sidecars

A thin SSH/SCP collaborator fetches the newest remote backup, and a Typer CLI
wires the pieces together with exit codes suitable for cron and monitoring.
"""

__version__ = "0.2.0"
__description__ = "Backup integrity verification and retention for a single VPS"

from backupwarden.core.locator import locate
from backupwarden.core.pruner import RetentionPruner
from backupwarden.core.verifier import IntegrityVerifier

__all__ = ["IntegrityVerifier", "RetentionPruner", "locate", "__version__"]
