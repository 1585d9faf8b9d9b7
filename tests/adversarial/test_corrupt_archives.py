"""Adversarial tests: damaged gzip containers fail the format probe."""

from __future__ import annotations

import gzip
import os

import pytest

from backupwarden.core.verifier import IntegrityVerifier
from backupwarden.models.results import VerificationOutcome

DUMP = os.urandom(64 * 1024)  # incompressible, so the stream spans many blocks


def _probe(verifier, artifact):
    verifier.verify(artifact)  # create the record first
    return verifier.verify(artifact, probe_format=True)


class TestCorruptContainers:
    def test_empty_file(self, verifier, make_backup):
        artifact = make_backup(raw=b"")
        assert _probe(verifier, artifact).outcome == VerificationOutcome.FORMAT_PROBE_FAILED

    def test_header_only(self, verifier, make_backup):
        artifact = make_backup(raw=gzip.compress(DUMP)[:10])
        assert _probe(verifier, artifact).outcome == VerificationOutcome.FORMAT_PROBE_FAILED

    def test_truncated_early(self, verifier, make_backup):
        artifact = make_backup(raw=gzip.compress(DUMP)[:200])
        assert _probe(verifier, artifact).outcome == VerificationOutcome.FORMAT_PROBE_FAILED

    def test_garbled_deflate_data(self, verifier, make_backup):
        data = bytearray(gzip.compress(DUMP))
        for i in range(10, 400):
            data[i] = 0xFF
        artifact = make_backup(raw=bytes(data))
        assert _probe(verifier, artifact).outcome == VerificationOutcome.FORMAT_PROBE_FAILED

    @pytest.mark.parametrize("raw", [b"PK\x03\x04zipfile", b"-- plain SQL dump\n"])
    def test_wrong_container(self, verifier, make_backup, raw):
        artifact = make_backup(raw=raw)
        result = _probe(verifier, artifact)
        assert result.outcome == VerificationOutcome.FORMAT_PROBE_FAILED
        assert "magic" in result.error

    def test_probe_reads_only_a_prefix(self, make_backup):
        # Damage far beyond the probe window is the digest's job, not the probe's.
        data = bytearray(gzip.compress(DUMP))
        data[-20] ^= 0xFF
        artifact = make_backup(raw=bytes(data))
        result = _probe(IntegrityVerifier(probe_bytes=1024), artifact)
        assert result.outcome == VerificationOutcome.MATCHED
