"""Retention Pruner: keep the N newest artifacts, delete the rest.

Expects the newest-first ordering produced by ``locate(..., select_all=True)``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from backupwarden.models.artifacts import DEFAULT_DIGEST_SUFFIX, Artifact
from backupwarden.models.results import PruneFailure, PruneReport

logger = logging.getLogger(__name__)


class RetentionPruner:
    """Deletes artifacts (and their digest records) beyond a keep-count.

    A failed deletion never stops the pass: failures are collected in the
    returned ``PruneReport`` so the caller can tell attempted from removed.
    """

    def __init__(self, digest_suffix: str = DEFAULT_DIGEST_SUFFIX) -> None:
        self._suffix = digest_suffix

    def prune(self, retention_set: Sequence[Artifact], keep_count: int) -> PruneReport:
        """Remove every artifact after the first ``keep_count``.

        ``keep_count <= 0`` disables pruning.
        """
        if keep_count <= 0 or len(retention_set) <= keep_count:
            return PruneReport(keep_count=keep_count)

        doomed = retention_set[keep_count:]
        removed = 0
        failures: list[PruneFailure] = []

        for artifact in doomed:
            try:
                artifact.path.unlink()
            except OSError as exc:
                logger.error("Failed to delete %s: %s", artifact.path, exc)
                failures.append(PruneFailure(path=str(artifact.path), error=str(exc)))
                continue
            removed += 1
            logger.info("Pruned %s", artifact.path)

            record = artifact.digest_record_path(self._suffix)
            try:
                record.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Failed to delete digest record %s: %s", record, exc)

        if failures:
            logger.warning(
                "Pruning incomplete: removed %d of %d artifact(s)", removed, len(doomed)
            )
        return PruneReport(
            keep_count=keep_count,
            attempted=len(doomed),
            removed=removed,
            failures=failures,
        )
