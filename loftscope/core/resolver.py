"""Import resolution.

A module reference is tried against an ordered list of strategies: the
importer's directory, the project root (and its source folders), then the
standard-library roots. The first existing candidate wins. Target files are
parsed through the session cache, so every importer of a module shares one
model.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from loftscope.core.cache import SessionCache, normalize_path
from loftscope.core.models import ImportDeclaration
from loftscope.core.visibility import can_import, symbol_visibility
from loftscope.languages.imports import module_path

if TYPE_CHECKING:
    from loftscope.config.models import ResolutionConfig
    from loftscope.languages.models import SourceFile

logger = structlog.get_logger()

DEFAULT_STDLIB_ROOTS = (Path("~/.polyloft/libs"), Path("~/.polyloft/src"))
DEFAULT_SOURCE_DIRS = ("", "libs", "src")

# importer path, module reference -> base directories to search
ResolutionStrategy = Callable[[Path, str], Iterator[Path]]


class ImportResolver:
    """Turns ``import`` references into files and file models."""

    def __init__(
        self,
        cache: SessionCache,
        project_root: Path | None = None,
        stdlib_roots: Sequence[Path] = DEFAULT_STDLIB_ROOTS,
        source_dirs: Sequence[str] = DEFAULT_SOURCE_DIRS,
        extension: str = ".pf",
    ) -> None:
        self.cache = cache
        self.project_root = normalize_path(project_root) if project_root else None
        self.stdlib_roots = [normalize_path(root) for root in stdlib_roots]
        self.source_dirs = list(source_dirs)
        self.extension = extension
        self.strategies: list[tuple[str, ResolutionStrategy]] = [
            ("importer", self._importer_dirs),
            ("project", self._project_dirs),
            ("stdlib", self._stdlib_dirs),
        ]

    @classmethod
    def from_config(cls, cache: SessionCache, project_root: Path, config: ResolutionConfig) -> ImportResolver:
        return cls(
            cache,
            project_root,
            stdlib_roots=config.stdlib_roots,
            source_dirs=config.source_dirs,
            extension=config.extension,
        )

    def _importer_dirs(self, importer: Path, module: str) -> Iterator[Path]:
        yield importer.parent

    def _project_dirs(self, importer: Path, module: str) -> Iterator[Path]:
        if self.project_root is None:
            return
        for folder in self.source_dirs:
            yield self.project_root / folder if folder else self.project_root

    def _stdlib_dirs(self, importer: Path, module: str) -> Iterator[Path]:
        yield from self.stdlib_roots

    def candidates(self, importer: Path, module: str) -> list[Path]:
        """Every path tried for ``module``, in order."""
        rel = module_path(module)
        basename = rel.rstrip("/").rsplit("/", 1)[-1]
        found: list[Path] = []
        for _, strategy in self.strategies:
            for base in strategy(normalize_path(importer), module):
                for candidate in (
                    base / f"{rel}{self.extension}",
                    base / rel / f"index{self.extension}",
                    base / rel / f"{basename}{self.extension}",
                ):
                    if candidate not in found:
                        found.append(candidate)
        return found

    def resolve(self, importer: Path, module: str) -> Path | None:
        """Absolute path of the module, or None if no candidate exists."""
        for candidate in self.candidates(importer, module):
            if candidate.is_file():
                return candidate.resolve()
        logger.debug("import_unresolved", importer=str(importer), module=module)
        return None

    def load(self, importer: Path, module: str) -> SourceFile | None:
        """Resolve and parse a module."""
        path = self.resolve(importer, module)
        if path is None:
            return None
        return self.cache.get(path)

    def resolve_imports(self, source: SourceFile) -> list[ImportDeclaration]:
        """Copies of the file's imports with paths and visibility decisions filled in.

        Visibility is decided for every symbol, found or not; a symbol that
        does not exist counts as public.
        """
        resolved: list[ImportDeclaration] = []
        for decl in source.imports:
            path = self.resolve(source.path, decl.module)
            target = self.cache.get(path) if path is not None else None
            decisions = {}
            for name in decl.names:
                symbol = None
                if target is not None:
                    symbol = target.entity_index.get(name) or target.functions.get(name)
                decisions[name] = can_import(source.path, path or source.path, symbol_visibility(symbol))
            resolved.append(replace(decl, resolved_path=path, decisions=decisions))
        return resolved
