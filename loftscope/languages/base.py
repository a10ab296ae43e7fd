"""Protocol for language parsers."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from loftscope.languages.models import SourceFile


class LanguageParser(Protocol):
    """Protocol for language parsers."""

    def parse(self, file: Path) -> SourceFile:
        """Read a file from disk and build its model."""
        ...

    def parse_text(self, text: str, file: Path, token: str | None = None) -> SourceFile:
        """Build the model of an in-memory buffer."""
        ...
