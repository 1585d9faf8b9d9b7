"""Shared test fixtures for backupwarden."""

from __future__ import annotations

import gzip
import os
from collections.abc import Callable
from pathlib import Path

import pytest

from backupwarden.core.pruner import RetentionPruner
from backupwarden.core.verifier import IntegrityVerifier
from backupwarden.models.artifacts import Artifact

# Fixed base so mtimes (and therefore ordering) are deterministic.
BASE_MTIME = 1_735_689_600  # 2025-01-01T00:00:00Z


@pytest.fixture
def backup_dir(tmp_path: Path) -> Path:
    """Provide an empty local backup directory."""
    d = tmp_path / "backups"
    d.mkdir()
    return d


@pytest.fixture
def verifier() -> IntegrityVerifier:
    return IntegrityVerifier()


@pytest.fixture
def pruner() -> RetentionPruner:
    return RetentionPruner()


@pytest.fixture
def make_backup(backup_dir: Path) -> Callable[..., Artifact]:
    """Factory fixture: write a gzip backup with a controlled mtime."""

    def _factory(
        name: str = "backup_20250101.tar.gz",
        content: bytes = b"-- PostgreSQL database dump\nCREATE TABLE t (id int);\n",
        age_hours: int = 0,
        raw: bytes | None = None,
        directory: Path | None = None,
    ) -> Artifact:
        path = (directory or backup_dir) / name
        path.write_bytes(raw if raw is not None else gzip.compress(content))
        mtime = BASE_MTIME - age_hours * 3600
        os.utime(path, (mtime, mtime))
        return Artifact.from_path(path)

    return _factory


@pytest.fixture
def make_series(make_backup: Callable[..., Artifact]) -> Callable[[int], list[Artifact]]:
    """Factory fixture: N daily backups, returned newest first."""

    def _factory(count: int) -> list[Artifact]:
        artifacts = [
            make_backup(
                name=f"backup_202501{day + 1:02d}.tar.gz",
                content=f"dump for day {day + 1}\n".encode(),
                age_hours=(count - 1 - day) * 24,
            )
            for day in range(count)
        ]
        return list(reversed(artifacts))

    return _factory
