"""
Content digests used by hash evidence.

Example:
    >>> from dyadt_contracts.hashing import sha256_file
    >>> digest = sha256_file("build/output.bin")
"""

from __future__ import annotations

import hashlib
from pathlib import Path

_CHUNK_SIZE = 1024 * 1024


def sha256_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def sha256_file(path: str | Path) -> str:
    """
    Compute the SHA-256 digest of a file's full contents.

    Args:
        path: File to read

    Returns:
        Lower-case hex digest

    Raises:
        OSError: If the file cannot be read
    """
    hasher = hashlib.sha256()
    with Path(path).open("rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest()
