"""SHA-256 content hashing for snapshot change detection"""

import hashlib
from pathlib import Path


def file_sha256(path: Path) -> str:
    """Return hex-encoded SHA-256 of the file's raw bytes, read in 64 KiB chunks."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()
