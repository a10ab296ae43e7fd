"""Unit tests for import resolution."""

import tempfile
from pathlib import Path

import pytest

from loftscope.config.models import ResolutionConfig
from loftscope.core.cache import SessionCache
from loftscope.core.resolver import ImportResolver


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td).resolve()


def write(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


@pytest.fixture
def project(temp_dir: Path) -> Path:
    """A project with a stdlib folder next to it."""
    root = temp_dir / "project"
    write(root / "app" / "main.pf")
    write(root / "app" / "helpers.pf", "class Helper:\nend\n")
    write(root / "lib" / "util.pf", "class Util:\nend\n")
    write(root / "libs" / "shared.pf", "class Shared:\nend\n")
    write(root / "geometry" / "index.pf", "class Shape:\nend\n")
    write(root / "math" / "math.pf", "class Vector:\nend\n")
    write(temp_dir / "stdlib" / "io.pf", "class File:\nend\n")
    return root


@pytest.fixture
def resolver(project: Path) -> ImportResolver:
    """Resolver rooted at the project with the stdlib folder configured."""
    return ImportResolver(SessionCache(), project, stdlib_roots=[project.parent / "stdlib"])


class TestResolve:
    """Tests for ImportResolver.resolve()."""

    def test_importer_directory(self, resolver: ImportResolver, project: Path) -> None:
        main = project / "app" / "main.pf"
        assert resolver.resolve(main, "helpers") == project / "app" / "helpers.pf"

    def test_dotted_module_from_project_root(self, resolver: ImportResolver, project: Path) -> None:
        main = project / "app" / "main.pf"
        assert resolver.resolve(main, "lib.util") == project / "lib" / "util.pf"

    def test_path_module(self, resolver: ImportResolver, project: Path) -> None:
        main = project / "app" / "main.pf"
        assert resolver.resolve(main, "../lib/util") == project / "lib" / "util.pf"

    def test_index_file(self, resolver: ImportResolver, project: Path) -> None:
        assert resolver.resolve(project / "app" / "main.pf", "geometry") == project / "geometry" / "index.pf"

    def test_folder_basename_file(self, resolver: ImportResolver, project: Path) -> None:
        assert resolver.resolve(project / "app" / "main.pf", "math") == project / "math" / "math.pf"

    def test_source_dirs(self, resolver: ImportResolver, project: Path) -> None:
        assert resolver.resolve(project / "app" / "main.pf", "shared") == project / "libs" / "shared.pf"

    def test_stdlib(self, resolver: ImportResolver, project: Path) -> None:
        assert resolver.resolve(project / "app" / "main.pf", "io") == project.parent / "stdlib" / "io.pf"

    def test_importer_directory_wins(self, resolver: ImportResolver, project: Path) -> None:
        write(project / "helpers.pf", "class Other:\nend\n")
        assert resolver.resolve(project / "app" / "main.pf", "helpers") == project / "app" / "helpers.pf"

    def test_missing(self, resolver: ImportResolver, project: Path) -> None:
        assert resolver.resolve(project / "app" / "main.pf", "nowhere.at.all") is None

    def test_candidates_order(self, resolver: ImportResolver, project: Path) -> None:
        candidates = resolver.candidates(project / "app" / "main.pf", "a.b")
        assert candidates[:3] == [
            project / "app" / "a" / "b.pf",
            project / "app" / "a" / "b" / "index.pf",
            project / "app" / "a" / "b" / "b.pf",
        ]
        assert candidates[-1] == project.parent / "stdlib" / "a" / "b" / "b.pf"

    def test_from_config(self, project: Path) -> None:
        config = ResolutionConfig(stdlib_roots=[project.parent / "stdlib"], source_dirs=["lib"])
        resolver = ImportResolver.from_config(SessionCache(), project, config)
        assert resolver.resolve(project / "app" / "main.pf", "util") == project / "lib" / "util.pf"
        assert resolver.resolve(project / "app" / "main.pf", "shared") is None


class TestLoad:
    """Tests for loading resolved modules."""

    def test_load_shares_cache(self, resolver: ImportResolver, project: Path) -> None:
        main = project / "app" / "main.pf"
        first = resolver.load(main, "lib.util")
        second = resolver.load(project / "app" / "helpers.pf", "lib.util")
        assert first is not None
        assert first is second
        assert [e.name for e in first.entities] == ["Util"]

    def test_load_missing(self, resolver: ImportResolver, project: Path) -> None:
        assert resolver.load(project / "app" / "main.pf", "nothing") is None


class TestResolveImports:
    """Tests for resolve_imports()."""

    def test_paths_and_decisions(self, resolver: ImportResolver, project: Path) -> None:
        write(project / "lib" / "guarded.pf", "protected class Guarded:\nend\nprivate class Hidden:\nend\n")
        main = project / "app" / "main.pf"
        source = resolver.cache.get(main, "import lib.guarded { Guarded, Hidden, Missing }\nimport ghost\n")
        assert source is not None

        guarded, ghost = resolver.resolve_imports(source)
        assert guarded.resolved_path == project / "lib" / "guarded.pf"
        assert not guarded.decisions["Guarded"].allowed
        assert not guarded.decisions["Hidden"].allowed
        assert guarded.decisions["Missing"].allowed
        assert ghost.resolved_path is None
        assert not ghost.is_resolved

    def test_source_imports_are_not_mutated(self, resolver: ImportResolver, project: Path) -> None:
        source = resolver.cache.get(project / "app" / "main.pf", "import lib.util { Util }\n")
        assert source is not None
        resolver.resolve_imports(source)
        assert source.imports[0].resolved_path is None
