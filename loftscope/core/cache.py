"""Session cache of parsed file models.

One cache belongs to one hosting session and is passed to every call that
needs file models. Entries are keyed by resolved path and validated with a
modification token: a SHA256 of the buffer for editor-supplied text, an
mtime/size fingerprint for files read from disk.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from loftscope.core.exceptions import SourceReadError
from loftscope.core.fingerprint import compute_file_fingerprint, compute_text_fingerprint
from loftscope.core.models import CacheStats
from loftscope.languages.polyloft import PolyloftParser

if TYPE_CHECKING:
    from loftscope.languages.base import LanguageParser
    from loftscope.languages.models import SourceFile

logger = structlog.get_logger()


@dataclass
class _Entry:
    source: SourceFile
    pinned: bool


def normalize_path(path: Path) -> Path:
    return Path(path).expanduser().resolve()


class SessionCache:
    """Read-through cache of ``SourceFile`` models."""

    def __init__(self, parser: LanguageParser | None = None) -> None:
        self._parser = parser or PolyloftParser()
        self._entries: dict[Path, _Entry] = {}
        self.stats = CacheStats()

    def get(self, path: Path, text: str | None = None) -> SourceFile | None:
        """Return the model of ``path``, building it if needed.

        With ``text`` the model reflects that text for this request only: it
        is reused when a cached model already holds the same text, and is never
        stored otherwise. Only ``open``/``change`` pin a buffer. Without text,
        an open buffer wins over the disk; otherwise the file is read.
        Unreadable files give None.
        """
        key = normalize_path(path)
        entry = self._entries.get(key)

        if text is not None:
            if entry is not None and entry.source.text == text:
                self.stats.hits += 1
                return entry.source
            self.stats.misses += 1
            logger.debug("cache_transient", path=str(key))
            return self._parser.parse_text(text, key, token=compute_text_fingerprint(text))

        if entry is not None and entry.pinned:
            self.stats.hits += 1
            return entry.source

        token = compute_file_fingerprint(key)
        if token is None:
            self._drop(key)
            return None
        if entry is not None and entry.source.token == token:
            self.stats.hits += 1
            return entry.source

        try:
            source = self._parser.parse(key)
        except SourceReadError as e:
            logger.warning("source_unreadable", path=str(key), error=str(e))
            self.stats.errors.append(str(e))
            self._drop(key)
            return None
        return self._store(key, source, pinned=False)

    def open(self, path: Path, text: str) -> SourceFile:
        """Editor opened a buffer."""
        return self._from_buffer(normalize_path(path), text)

    def change(self, path: Path, text: str) -> SourceFile:
        """Editor buffer changed; the model is rebuilt from scratch."""
        return self.open(path, text)

    def close(self, path: Path) -> bool:
        """Editor closed a buffer; later reads come from disk."""
        return self.invalidate(path)

    def invalidate(self, path: Path) -> bool:
        """Drop the cached model for ``path``. Returns True if there was one."""
        removed = self._drop(normalize_path(path))
        if removed:
            self.stats.invalidations += 1
            logger.debug("cache_invalidated", path=str(path))
        return removed

    def clear(self) -> None:
        self._entries.clear()

    def _from_buffer(self, key: Path, text: str) -> SourceFile:
        token = compute_text_fingerprint(text)
        entry = self._entries.get(key)
        if entry is not None and entry.pinned and entry.source.token == token:
            self.stats.hits += 1
            return entry.source
        return self._store(key, self._parser.parse_text(text, key, token=token), pinned=True)

    def _store(self, key: Path, source: SourceFile, pinned: bool) -> SourceFile:
        self.stats.misses += 1
        self._entries[key] = _Entry(source, pinned)
        logger.debug("cache_built", path=str(key), entities=len(source.entities), pinned=pinned)
        return source

    def _drop(self, key: Path) -> bool:
        return self._entries.pop(key, None) is not None

    def __contains__(self, path: object) -> bool:
        return isinstance(path, Path) and normalize_path(path) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"SessionCache(files={len(self)}, {self.stats!r})"
