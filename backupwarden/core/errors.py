"""Exception hierarchy for backupwarden.

Absence of backups is not an exception (see ``OverallResult.NO_ARTIFACTS``);
integrity findings are outcomes, not exceptions. Only I/O and transfer
failures are raised.
"""

from __future__ import annotations

from pathlib import Path


class BackupWardenError(RuntimeError):
    """Base class for every error raised by backupwarden."""


class ArtifactIOError(BackupWardenError):
    """An artifact or its digest record could not be read, written or deleted.

    Recoverable by retry; never converted into a verification outcome by
    ``IntegrityVerifier.verify``.
    """

    def __init__(self, path: Path | str, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{message}: {self.path}")


class RemoteTransferError(BackupWardenError):
    """ssh/scp failed, timed out, or produced unparseable output."""


class RemoteArtifactNotFoundError(BackupWardenError):
    """The remote directory holds no file matching the requested pattern."""
