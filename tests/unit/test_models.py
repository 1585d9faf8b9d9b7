"""Tests for result models: precedence, exit codes, immutability."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from backupwarden.models.artifacts import Artifact
from backupwarden.models.results import (
    BatchReport,
    OverallResult,
    PruneFailure,
    PruneReport,
    VerificationOutcome,
)


class TestVerificationOutcome:
    def test_precedence(self):
        ranked = sorted(VerificationOutcome, key=lambda o: o.rank, reverse=True)
        assert ranked == [
            VerificationOutcome.MISMATCHED,
            VerificationOutcome.FORMAT_PROBE_FAILED,
            VerificationOutcome.RECORD_CREATED,
            VerificationOutcome.MATCHED,
        ]

    @pytest.mark.parametrize(
        "outcome,result",
        [
            (VerificationOutcome.MATCHED, OverallResult.HEALTHY),
            (VerificationOutcome.RECORD_CREATED, OverallResult.RECORDS_INITIALIZED),
            (VerificationOutcome.FORMAT_PROBE_FAILED, OverallResult.FORMAT_FAILURE),
            (VerificationOutcome.MISMATCHED, OverallResult.INTEGRITY_FAILURE),
        ],
    )
    def test_outcome_to_result(self, outcome, result):
        assert OverallResult.from_outcome(outcome) == result


class TestOverallResult:
    @pytest.mark.parametrize(
        "result,code",
        [
            (OverallResult.HEALTHY, 0),
            (OverallResult.RECORDS_INITIALIZED, 3),
            (OverallResult.INTEGRITY_FAILURE, 4),
            (OverallResult.FORMAT_FAILURE, 5),
            (OverallResult.NO_ARTIFACTS, 6),
        ],
    )
    def test_exit_codes(self, result, code):
        assert result.exit_code == code

    def test_batch_report_exit_code(self):
        assert BatchReport(result=OverallResult.NO_ARTIFACTS).exit_code == 6


class TestArtifact:
    def test_digest_record_path(self):
        a = Artifact(path=Path("/b/backup_1.tar.gz"), modified_at=datetime.now(timezone.utc))
        assert a.digest_record_path() == Path("/b/backup_1.tar.gz.sha256")
        assert a.digest_record_path(".md5") == Path("/b/backup_1.tar.gz.md5")
        assert a.name == "backup_1.tar.gz"

    def test_frozen(self):
        a = Artifact(path=Path("/b/x.gz"), modified_at=datetime.now(timezone.utc))
        with pytest.raises(ValidationError):
            a.size_bytes = 5

    def test_from_path(self, make_backup):
        made = make_backup()
        again = Artifact.from_path(made.path)
        assert again == made
        assert again.modified_at.tzinfo is not None


class TestPruneReport:
    def test_ok_without_failures(self):
        assert PruneReport(keep_count=3, attempted=2, removed=2).ok

    def test_partial_failure_distinguishable(self):
        report = PruneReport(
            keep_count=3,
            attempted=2,
            removed=1,
            failures=[PruneFailure(path="/b/x.gz", error="busy")],
        )
        assert not report.ok
        assert report.removed < report.attempted
