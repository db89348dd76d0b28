"""
Data Integrity Utilities.

SHA-256 helpers used to verify downloaded archives and previously cached
files against their registry digests.
"""

from __future__ import annotations

import hashlib
from pathlib import Path


def normalize_hex(digest: str) -> str:
    """Lowercase and strip a hex digest so comparisons ignore case and whitespace."""
    return digest.strip().lower()


def sha256_digest(payload: bytes) -> str:
    """Returns the hexadecimal SHA-256 digest of an in-memory payload."""
    return hashlib.sha256(payload).hexdigest()


def sha256_checksum(path: Path, chunk_size: int = 65536) -> str:
    """
    Calculates the SHA-256 checksum of a file using buffered reading.

    Args:
        path (Path): Path to the file to verify.
        chunk_size (int): Read buffer size in bytes.

    Returns:
        str: The calculated hexadecimal SHA-256 hash.
    """
    hasher = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def digests_match(expected: str, actual: str) -> bool:
    """Compares two hex digests after normalization."""
    return normalize_hex(expected) == normalize_hex(actual)
