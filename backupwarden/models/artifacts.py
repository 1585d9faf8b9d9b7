"""Backup artifact models."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, ConfigDict

DEFAULT_DIGEST_SUFFIX = ".sha256"


class Artifact(BaseModel):
    """A local backup file.

    Produced externally (the nightly dump on the VPS); backupwarden reads it
    and may delete it, but never writes to it.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    modified_at: datetime
    size_bytes: int = 0

    @classmethod
    def from_path(cls, path: Path | str) -> Artifact:
        """Build an Artifact from a file on disk (stat is taken now)."""
        p = Path(path)
        st = p.stat()
        return cls.from_stat(p, st)

    @classmethod
    def from_stat(cls, path: Path, st: os.stat_result) -> Artifact:
        return cls(
            path=path,
            modified_at=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            size_bytes=st.st_size,
        )

    @property
    def name(self) -> str:
        return self.path.name

    def digest_record_path(self, suffix: str = DEFAULT_DIGEST_SUFFIX) -> Path:
        """Sidecar location: the artifact path with ``suffix`` appended."""
        return self.path.with_name(self.path.name + suffix)


class RemoteFile(BaseModel):
    """A file seen in a remote directory listing."""

    model_config = ConfigDict(frozen=True)

    name: str
    modified_at: datetime
    size_bytes: int = 0
