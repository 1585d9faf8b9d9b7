"""Verification and retention results.

Outcome precedence (high to low) decides the overall result of a batch:
mismatched > format_probe_failed > record_created > matched.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from backupwarden.models.artifacts import Artifact


class VerificationOutcome(str, Enum):
    """Per-artifact verification result."""

    MATCHED = "matched"
    RECORD_CREATED = "record_created"
    FORMAT_PROBE_FAILED = "format_probe_failed"
    MISMATCHED = "mismatched"

    @property
    def rank(self) -> int:
        return _OUTCOME_RANK[self]


_OUTCOME_RANK: dict[VerificationOutcome, int] = {
    VerificationOutcome.MATCHED: 0,
    VerificationOutcome.RECORD_CREATED: 1,
    VerificationOutcome.FORMAT_PROBE_FAILED: 2,
    VerificationOutcome.MISMATCHED: 3,
}


class VerificationStep(str, Enum):
    """Which step of verification produced a non-passing outcome."""

    IO = "io"
    DIGEST = "digest"
    FORMAT_PROBE = "format_probe"


class OverallResult(str, Enum):
    """Batch result, mapped to a process exit code."""

    HEALTHY = "healthy"
    RECORDS_INITIALIZED = "records_initialized"
    INTEGRITY_FAILURE = "integrity_failure"
    FORMAT_FAILURE = "format_failure"
    NO_ARTIFACTS = "no_artifacts"

    @property
    def exit_code(self) -> int:
        return _EXIT_CODES[self]

    @classmethod
    def from_outcome(cls, outcome: VerificationOutcome) -> OverallResult:
        return _RESULT_FOR_OUTCOME[outcome]


_EXIT_CODES: dict[OverallResult, int] = {
    OverallResult.HEALTHY: 0,
    OverallResult.RECORDS_INITIALIZED: 3,
    OverallResult.INTEGRITY_FAILURE: 4,
    OverallResult.FORMAT_FAILURE: 5,
    OverallResult.NO_ARTIFACTS: 6,
}

_RESULT_FOR_OUTCOME: dict[VerificationOutcome, OverallResult] = {
    VerificationOutcome.MATCHED: OverallResult.HEALTHY,
    VerificationOutcome.RECORD_CREATED: OverallResult.RECORDS_INITIALIZED,
    VerificationOutcome.FORMAT_PROBE_FAILED: OverallResult.FORMAT_FAILURE,
    VerificationOutcome.MISMATCHED: OverallResult.INTEGRITY_FAILURE,
}


class ArtifactVerification(BaseModel):
    """Everything an operator needs to act on one artifact's result.

    An artifact that could not be read at all carries ``failed_step=io`` and
    an ``error``; it ranks as ``format_probe_failed`` so the batch is never
    reported healthy.
    """

    model_config = ConfigDict(frozen=True)

    artifact: Artifact
    outcome: VerificationOutcome
    stored_digest: str | None = None
    computed_digest: str | None = None
    failed_step: VerificationStep | None = None
    error: str | None = None


class BatchReport(BaseModel):
    """Aggregate of a ``verify_all`` run."""

    model_config = ConfigDict(frozen=True)

    result: OverallResult
    verifications: list[ArtifactVerification] = []

    @property
    def exit_code(self) -> int:
        return self.result.exit_code

    @property
    def error_count(self) -> int:
        return sum(1 for v in self.verifications if v.failed_step == VerificationStep.IO)


class PruneFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    error: str


class PruneReport(BaseModel):
    """Result of a pruning pass; ``removed < attempted`` means partial failure."""

    model_config = ConfigDict(frozen=True)

    keep_count: int
    attempted: int = 0
    removed: int = 0
    failures: list[PruneFailure] = []

    @property
    def ok(self) -> bool:
        return not self.failures
