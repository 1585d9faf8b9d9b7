"""Integrity Verifier: SHA-256 against a hash of record, plus a gzip probe.

The sidecar ``<artifact>.sha256`` is authoritative once it exists: it is
created the first time an artifact is seen and never rewritten afterwards.
A disagreement is reported as a mismatch, not corrected.
"""

from __future__ import annotations

import gzip
import logging
import os
import zlib
from collections.abc import Iterable
from pathlib import Path

from backupwarden.core.errors import ArtifactIOError
from backupwarden.core.hasher import digests_equal, extract_hex_digest, sha256_file
from backupwarden.models.artifacts import DEFAULT_DIGEST_SUFFIX, Artifact
from backupwarden.models.results import (
    ArtifactVerification,
    BatchReport,
    OverallResult,
    VerificationOutcome,
    VerificationStep,
)

logger = logging.getLogger(__name__)

_GZIP_MAGIC = b"\x1f\x8b"


class IntegrityVerifier:
    """Verifies backup artifacts against their digest records.

    Parameters
    ----------
    digest_suffix:
        Sidecar naming convention (artifact path + suffix).
    probe_bytes:
        How much decompressed data the gzip probe must read successfully.
    chunk_size:
        Read size used while hashing.
    """

    def __init__(
        self,
        digest_suffix: str = DEFAULT_DIGEST_SUFFIX,
        probe_bytes: int = 4096,
        chunk_size: int = 1024 * 1024,
    ) -> None:
        self._suffix = digest_suffix
        self._probe_bytes = probe_bytes
        self._chunk_size = chunk_size

    # ------------------------------------------------------------------
    # Single artifact
    # ------------------------------------------------------------------

    def verify(self, artifact: Artifact, probe_format: bool = False) -> ArtifactVerification:
        """Verify one artifact.

        Raises ``ArtifactIOError`` if the artifact cannot be read, or if no
        record existed and one cannot be written.
        """
        computed = self._compute(artifact.path)
        record_path = artifact.digest_record_path(self._suffix)

        stored = self._read_record(record_path)
        if stored is None and self._create_record(record_path, computed):
            logger.info("Created digest record %s", record_path)
            outcome = VerificationOutcome.RECORD_CREATED
            stored_digest: str | None = computed
        else:
            if stored is None:
                # Created by someone else since we looked; it is the hash of record.
                stored = self._read_record(record_path) or ""
            stored_digest = extract_hex_digest(stored)
            if stored_digest is None or not digests_equal(stored_digest, computed):
                logger.warning(
                    "Digest mismatch for %s: stored=%s computed=%s",
                    artifact.path, stored_digest or "<none>", computed,
                )
                return ArtifactVerification(
                    artifact=artifact,
                    outcome=VerificationOutcome.MISMATCHED,
                    stored_digest=stored_digest,
                    computed_digest=computed,
                    failed_step=VerificationStep.DIGEST,
                )
            outcome = VerificationOutcome.MATCHED

        if probe_format:
            problem = self._probe(artifact.path)
            if problem is not None:
                logger.warning("Format probe failed for %s: %s", artifact.path, problem)
                return ArtifactVerification(
                    artifact=artifact,
                    outcome=VerificationOutcome.FORMAT_PROBE_FAILED,
                    stored_digest=stored_digest,
                    computed_digest=computed,
                    failed_step=VerificationStep.FORMAT_PROBE,
                    error=problem,
                )

        return ArtifactVerification(
            artifact=artifact,
            outcome=outcome,
            stored_digest=stored_digest,
            computed_digest=computed,
        )

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def verify_all(
        self, artifacts: Iterable[Artifact], probe_format: bool = False
    ) -> BatchReport:
        """Verify every artifact and fold the results into one overall result.

        Per-artifact I/O failures are logged and recorded; they rank as a
        format failure so the batch can never come out healthy.
        """
        verifications: list[ArtifactVerification] = []
        for artifact in artifacts:
            try:
                verifications.append(self.verify(artifact, probe_format=probe_format))
            except ArtifactIOError as exc:
                logger.error("Could not verify %s: %s", artifact.path, exc)
                verifications.append(
                    ArtifactVerification(
                        artifact=artifact,
                        outcome=VerificationOutcome.FORMAT_PROBE_FAILED,
                        failed_step=VerificationStep.IO,
                        error=str(exc),
                    )
                )

        if not verifications:
            return BatchReport(result=OverallResult.NO_ARTIFACTS)

        worst = max((v.outcome for v in verifications), key=lambda o: o.rank)
        return BatchReport(
            result=OverallResult.from_outcome(worst),
            verifications=verifications,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _compute(self, path: Path) -> str:
        try:
            return sha256_file(path, self._chunk_size)
        except OSError as exc:
            raise ArtifactIOError(path, f"cannot read artifact ({exc.strerror or exc})") from exc

    @staticmethod
    def _read_record(record_path: Path) -> str | None:
        """Return the record's text, or None when there is no record."""
        try:
            return record_path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise ArtifactIOError(
                record_path, f"cannot read digest record ({exc.strerror or exc})"
            ) from exc

    @staticmethod
    def _create_record(record_path: Path, digest: str) -> bool:
        """Write a new record exclusively. Returns False if one already exists.

        The digest is written to a hidden temporary file first and hard-linked
        into place, so a failed write never leaves a partial record behind.
        """
        tmp_path = record_path.with_name(f".{record_path.name}.{os.getpid()}.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as fh:
                fh.write(f"{digest}\n")
            os.link(tmp_path, record_path)
        except FileExistsError:
            return False
        except OSError as exc:
            raise ArtifactIOError(
                record_path, f"cannot write digest record ({exc.strerror or exc})"
            ) from exc
        finally:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Could not remove temporary record %s: %s", tmp_path, exc)
        return True

    def _probe(self, path: Path) -> str | None:
        """Decode the first block of a gzip stream. Returns a problem or None.

        Damage to the container is a problem; failing to read the file at all
        raises ``ArtifactIOError``.
        """
        try:
            with open(path, "rb") as raw:
                magic = raw.read(2)
        except OSError as exc:
            raise ArtifactIOError(path, f"cannot read artifact ({exc.strerror or exc})") from exc
        if magic != _GZIP_MAGIC:
            return "not a gzip stream (bad magic bytes)"

        try:
            with gzip.open(path, "rb") as gz:
                gz.read(self._probe_bytes)
        except (gzip.BadGzipFile, EOFError, zlib.error) as exc:
            return f"{type(exc).__name__}: {exc}"
        except OSError as exc:
            raise ArtifactIOError(path, f"cannot read artifact ({exc.strerror or exc})") from exc
        return None
