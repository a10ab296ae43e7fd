"""Modification tokens used to key cached file models."""

from __future__ import annotations

import hashlib
from pathlib import Path


def compute_text_fingerprint(text: str) -> str:
    """SHA256 of an in-memory buffer."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def compute_file_fingerprint(file: Path) -> str | None:
    """Cheap token for a file on disk, or None if it cannot be stat'ed."""
    try:
        stat = file.stat()
    except OSError:
        return None
    return f"{stat.st_mtime_ns}-{stat.st_size}"
