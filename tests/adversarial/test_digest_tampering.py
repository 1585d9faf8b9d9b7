"""Adversarial tests: tampered records and artifacts are always caught.

The digest record is the hash of record. Nothing the verifier does may
rewrite it, and nothing may turn a mismatch into a softer finding.
"""

from __future__ import annotations

import hashlib

from backupwarden.core.verifier import IntegrityVerifier
from backupwarden.models.results import OverallResult, VerificationOutcome


def _digest(path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


class TestRecordTampering:
    def test_wrong_digest_is_reported_not_corrected(self, verifier, make_backup):
        artifact = make_backup()
        forged = "deadbeef" * 8
        artifact.digest_record_path().write_text(forged)
        assert verifier.verify(artifact).outcome == VerificationOutcome.MISMATCHED
        assert artifact.digest_record_path().read_text() == forged

    def test_repeated_runs_stay_mismatched(self, verifier, make_backup):
        artifact = make_backup()
        artifact.digest_record_path().write_text("1" * 64)
        outcomes = {verifier.verify(artifact).outcome for _ in range(3)}
        assert outcomes == {VerificationOutcome.MISMATCHED}

    def test_digest_in_prose_parses_like_bare(self, verifier, make_backup):
        artifact = make_backup()
        real = _digest(artifact.path)
        artifact.digest_record_path().write_text(f"sha256: {real} (generated 2024-01-01)")
        assert verifier.verify(artifact).outcome == VerificationOutcome.MATCHED

    def test_prose_with_wrong_digest(self, verifier, make_backup):
        artifact = make_backup()
        artifact.digest_record_path().write_text(f"sha256: {'ab12' * 16} (generated 2024-01-01)")
        assert verifier.verify(artifact).outcome == VerificationOutcome.MISMATCHED

    def test_truncated_digest_is_mismatch(self, verifier, make_backup):
        artifact = make_backup()
        artifact.digest_record_path().write_text(_digest(artifact.path)[:63])
        assert verifier.verify(artifact).outcome == VerificationOutcome.MISMATCHED

    def test_padded_digest_is_mismatch(self, verifier, make_backup):
        artifact = make_backup()
        artifact.digest_record_path().write_text(_digest(artifact.path) + "0")
        assert verifier.verify(artifact).outcome == VerificationOutcome.MISMATCHED

    def test_binary_garbage_record(self, verifier, make_backup):
        artifact = make_backup()
        artifact.digest_record_path().write_bytes(b"\xff\xfe\x00\x01" * 40)
        assert verifier.verify(artifact).outcome == VerificationOutcome.MISMATCHED


class TestArtifactTampering:
    def test_modified_artifact_after_record(self, verifier, make_backup):
        artifact = make_backup()
        verifier.verify(artifact)
        with open(artifact.path, "ab") as fh:
            fh.write(b"\x00")
        assert verifier.verify(artifact).outcome == VerificationOutcome.MISMATCHED

    def test_single_byte_flip_deep_in_file(self, make_backup):
        artifact = make_backup(raw=b"\x1f\x8b" + b"A" * 5_000_000)
        verifier = IntegrityVerifier(chunk_size=64 * 1024)
        verifier.verify(artifact)
        data = bytearray(artifact.path.read_bytes())
        data[4_999_999] ^= 0x01
        artifact.path.write_bytes(bytes(data))
        assert verifier.verify(artifact).outcome == VerificationOutcome.MISMATCHED


class TestConcurrentRecord:
    def test_record_appearing_late_is_not_clobbered(self, verifier, make_backup, monkeypatch):
        artifact = make_backup()
        record = artifact.digest_record_path()
        foreign = "c" * 64
        real_read = IntegrityVerifier._read_record
        calls = {"n": 0}

        def _racy_read(path):
            calls["n"] += 1
            if calls["n"] == 1:
                # Another process writes the record right after our first look.
                record.write_text(foreign)
                return None
            return real_read(path)

        monkeypatch.setattr(IntegrityVerifier, "_read_record", staticmethod(_racy_read))
        result = verifier.verify(artifact)
        assert result.outcome == VerificationOutcome.MISMATCHED
        assert record.read_text() == foreign


class TestMismatchPrecedence:
    def test_mismatch_beats_corrupt_container(self, verifier, make_backup):
        artifact = make_backup(raw=b"definitely not gzip")
        artifact.digest_record_path().write_text("e" * 64)
        result = verifier.verify(artifact, probe_format=True)
        assert result.outcome == VerificationOutcome.MISMATCHED

    def test_batch_mismatch_beats_probe_failure(self, verifier, make_backup):
        corrupt = make_backup("backup_1.tar.gz", raw=b"junk", age_hours=0)
        tampered = make_backup("backup_2.tar.gz", age_hours=1)
        tampered.digest_record_path().write_text("e" * 64)
        report = verifier.verify_all([corrupt, tampered], probe_format=True)
        assert report.result == OverallResult.INTEGRITY_FAILURE
