"""Backupwarden data models: all Pydantic v2, all frozen (immutable)."""

from backupwarden.models.artifacts import DEFAULT_DIGEST_SUFFIX, Artifact, RemoteFile
from backupwarden.models.results import (
    ArtifactVerification,
    BatchReport,
    OverallResult,
    PruneFailure,
    PruneReport,
    VerificationOutcome,
    VerificationStep,
)

__all__ = [
    # artifacts
    "DEFAULT_DIGEST_SUFFIX",
    "Artifact",
    "RemoteFile",
    # results
    "VerificationOutcome",
    "VerificationStep",
    "ArtifactVerification",
    "OverallResult",
    "BatchReport",
    "PruneFailure",
    "PruneReport",
]
