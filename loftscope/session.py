"""Hosting session: one cache, one resolver, configuration gates."""

from __future__ import annotations

from pathlib import Path

import structlog

from loftscope.config import LoftscopeConfig, load_config
from loftscope.core.cache import SessionCache, normalize_path
from loftscope.core.exceptions import SourceReadError
from loftscope.core.graph import HierarchyGraph
from loftscope.core.models import SymbolEntity
from loftscope.core.resolver import ImportResolver
from loftscope.features import (
    AnalysisContext,
    CompletionItem,
    Diagnostic,
    Document,
    HoverInfo,
    Location,
    complete,
    find_definition,
    hover,
    lint,
    offset_at,
)
from loftscope.features.context import load_source
from loftscope.languages.models import SourceFile

logger = structlog.get_logger()


class AnalysisSession:
    """Entry point for hosts such as the CLI, the MCP server or an editor bridge.

    Owns the only persistent state, a SessionCache, and forwards editor
    notifications to it. Requests take 1-based line/column positions and an
    optional unsaved text; without text the open buffer or the file on disk
    is used.
    """

    def __init__(
        self,
        project_root: Path | None = None,
        config: LoftscopeConfig | None = None,
        cache: SessionCache | None = None,
    ) -> None:
        self.project_root = normalize_path(project_root or Path.cwd())
        self.config = config or load_config(self.project_root)
        self.cache = cache or SessionCache()
        self.resolver = ImportResolver.from_config(self.cache, self.project_root, self.config.resolution)

    # Editor notifications

    def open(self, path: Path, text: str) -> SourceFile:
        return self.cache.open(path, text)

    def change(self, path: Path, text: str) -> SourceFile:
        return self.cache.change(path, text)

    def close(self, path: Path) -> bool:
        return self.cache.close(path)

    # Requests

    def document(self, path: Path, text: str | None = None) -> Document:
        """The request's view of ``path``.

        Raises:
            SourceReadError: No text was given and the file cannot be read.
        """
        key = normalize_path(path)
        if text is None:
            source = self.cache.get(key)
            if source is None:
                raise SourceReadError(f"Cannot read {key}")
            text = source.text
        return Document(key, text)

    def source(self, path: Path, text: str | None = None) -> SourceFile:
        document = self.document(path, text)
        source = load_source(document, self.cache)
        if source is None:
            raise SourceReadError(f"Cannot read {document.path}")
        return source

    def context(self, path: Path, text: str | None = None) -> AnalysisContext:
        return AnalysisContext(self.source(path, text), self.resolver)

    def symbols(self, path: Path, text: str | None = None) -> list[SymbolEntity]:
        return list(self.source(path, text).entities)

    def hierarchy(self, path: Path, text: str | None = None) -> HierarchyGraph:
        """Hierarchy over the file's entities and everything it imports."""
        return self.context(path, text).graph

    def complete(
        self, path: Path, line: int, column: int, text: str | None = None
    ) -> list[CompletionItem]:
        if not self.config.completion.enabled:
            return []
        document = self.document(path, text)
        offset = offset_at(document.text, line, column)
        return complete(document, offset, cache=self.cache, resolver=self.resolver)

    def hover(self, path: Path, line: int, column: int, text: str | None = None) -> HoverInfo | None:
        document = self.document(path, text)
        offset = offset_at(document.text, line, column)
        return hover(document, offset, cache=self.cache, resolver=self.resolver)

    def definition(
        self, path: Path, line: int, column: int, text: str | None = None
    ) -> Location | None:
        document = self.document(path, text)
        offset = offset_at(document.text, line, column)
        return find_definition(document, offset, cache=self.cache, resolver=self.resolver)

    def lint(self, path: Path, text: str | None = None, *, on_type: bool = False) -> list[Diagnostic]:
        """Diagnostics for ``path``. ``on_type`` marks requests made while typing."""
        linting = self.config.linting
        if not linting.enabled or (on_type and not linting.on_type):
            logger.debug("lint_skipped", path=str(path), on_type=on_type)
            return []
        document = self.document(path, text)
        return lint(
            document,
            cache=self.cache,
            resolver=self.resolver,
            indent_width=linting.indent_width,
        )

    def __repr__(self) -> str:
        return f"AnalysisSession(root={self.project_root}, {self.cache!r})"
