"""SHA-256 helpers for backup files and their ``.sha256`` sidecars."""

from __future__ import annotations

import hashlib
import re
from pathlib import Path

DIGEST_HEX_LENGTH = 64

# A run of exactly DIGEST_HEX_LENGTH hex characters, not part of a longer hex run.
_DIGEST_RE = re.compile(
    rf"(?<![0-9a-fA-F])[0-9a-fA-F]{{{DIGEST_HEX_LENGTH}}}(?![0-9a-fA-F])"
)


def sha256_file(path: Path, chunk_size: int = 1024 * 1024) -> str:
    """Stream a whole file through SHA-256 and return the lowercase hex digest.

    Raises ``OSError`` when the file cannot be opened or read.
    """
    h = hashlib.sha256()
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(chunk_size), b""):
            h.update(chunk)
    return h.hexdigest()


def extract_hex_digest(text: str) -> str | None:
    """Return the first full-length hex digest run in ``text`` (lowercased), if any.

    Tolerates annotation around the digest, e.g. ``sha256sum`` output
    (``<hex>  backup.gz``) or ``sha256: <hex> (generated 2024-01-01)``.
    """
    match = _DIGEST_RE.search(text)
    if match is None:
        return None
    return match.group(0).lower()


def digests_equal(a: str, b: str) -> bool:
    """Case-insensitive digest comparison."""
    return a.lower() == b.lower()
