"""
Content digests for telling true duplicates from naming collisions.
"""

import hashlib
from pathlib import Path

CHUNK_SIZE = 65536


def file_digest(file_path: Path) -> str:
    """Compute the SHA-256 hex digest of a whole file, reading in chunks."""
    digest = hashlib.sha256()
    with open(file_path, 'rb') as f:
        while True:
            chunk = f.read(CHUNK_SIZE)
            if not chunk:
                break
            digest.update(chunk)
    return digest.hexdigest()


def are_identical(file1: Path, file2: Path) -> bool:
    """Check whether two files have exactly the same content.

    Files of different sizes can never match, so they are rejected without
    being read. Same-sized files are compared by full-content digest.
    """
    if file1.stat().st_size != file2.stat().st_size:
        return False

    return file_digest(file1) == file_digest(file2)
