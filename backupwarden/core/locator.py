"""Artifact Locator: newest-first discovery of backup files."""

from __future__ import annotations

import fnmatch
import logging
import os
from pathlib import Path

from backupwarden.core.errors import ArtifactIOError
from backupwarden.models.artifacts import DEFAULT_DIGEST_SUFFIX, Artifact

logger = logging.getLogger(__name__)


def locate(
    directory: Path | str,
    pattern: str,
    select_all: bool = False,
    *,
    digest_suffix: str = DEFAULT_DIGEST_SUFFIX,
) -> list[Artifact]:
    """Find artifacts in ``directory`` whose name matches ``pattern``.

    Shell-glob matching on the file name only, no recursion. Sidecar files
    (``digest_suffix``) and hidden files are never returned. Results are
    ordered by mtime, newest first, with the path as a deterministic
    tie-break. With ``select_all=False`` at most the newest artifact is
    returned.

    A missing directory or no match yields an empty list; a directory that
    cannot be listed, or an entry that cannot be stat-ed, raises
    ``ArtifactIOError``.
    """
    base = Path(directory)
    if not base.is_dir():
        logger.debug("Backup directory %s does not exist", base)
        return []

    found: list[Artifact] = []
    try:
        with os.scandir(base) as entries:
            for entry in entries:
                artifact = _match(entry, pattern, digest_suffix)
                if artifact is not None:
                    found.append(artifact)
    except OSError as exc:
        raise ArtifactIOError(base, f"cannot list backup directory ({exc.strerror or exc})") from exc

    found.sort(key=lambda a: str(a.path))
    found.sort(key=lambda a: a.modified_at, reverse=True)

    logger.debug("Located %d artifact(s) matching %r in %s", len(found), pattern, base)
    if not select_all:
        return found[:1]
    return found


def _match(entry: os.DirEntry, pattern: str, digest_suffix: str) -> Artifact | None:
    # Like the shell, "*" does not match a leading dot; in-flight temp files are hidden.
    if entry.name.startswith("."):
        return None
    if digest_suffix and entry.name.endswith(digest_suffix):
        return None
    if not fnmatch.fnmatchcase(entry.name, pattern):
        return None
    try:
        if not entry.is_file():
            return None
        st = entry.stat()
    except FileNotFoundError:
        # Vanished between listing and stat.
        return None
    return Artifact.from_stat(Path(entry.path), st)
