"""SHA-256 helpers for artifact integrity checks."""

from __future__ import annotations

import hashlib
from pathlib import Path

_CHUNK_SIZE = 1024 * 1024


def file_sha256(path: Path) -> str:
    """Stream a file through SHA-256 and return the lowercase hex digest.

    Wheels can be hundreds of megabytes (torch), so the file is read in
    chunks rather than loaded whole.
    """
    h = hashlib.sha256()
    with Path(path).open("rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


def digests_match(actual: str, expected: str) -> bool:
    """Compare hex digests case-insensitively."""
    return actual.strip().lower() == expected.strip().lower()


def file_matches_digest(path: Path, expected: str) -> bool:
    """Re-hash *path* and compare against *expected*. Missing file is False."""
    if not Path(path).is_file():
        return False
    return digests_match(file_sha256(path), expected)
