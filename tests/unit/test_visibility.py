"""Unit tests for import visibility rules."""

from pathlib import Path

from loftscope.core.models import EntityKind, Span, SymbolEntity, Visibility
from loftscope.core.visibility import (
    PRIVATE_REASON,
    PROTECTED_REASON,
    can_import,
    same_directory,
    symbol_visibility,
)

ROOT = Path("/project")


class TestCanImport:
    """Tests for can_import()."""

    def test_public_from_anywhere(self) -> None:
        decision = can_import(ROOT / "app" / "main.pf", ROOT / "lib" / "util.pf", Visibility.PUBLIC)
        assert decision.allowed
        assert decision.reason is None

    def test_protected_same_folder(self) -> None:
        decision = can_import(ROOT / "lib" / "main.pf", ROOT / "lib" / "util.pf", Visibility.PROTECTED)
        assert decision.allowed

    def test_protected_other_folder(self) -> None:
        decision = can_import(ROOT / "app" / "main.pf", ROOT / "lib" / "util.pf", Visibility.PROTECTED)
        assert not decision.allowed
        assert decision.reason == PROTECTED_REASON
        assert "same folder" in decision.reason

    def test_protected_subfolder_is_other_folder(self) -> None:
        decision = can_import(ROOT / "main.pf", ROOT / "lib" / "util.pf", Visibility.PROTECTED)
        assert not decision.allowed

    def test_private_never(self) -> None:
        decision = can_import(ROOT / "lib" / "main.pf", ROOT / "lib" / "util.pf", Visibility.PRIVATE)
        assert not decision.allowed
        assert decision.reason == PRIVATE_REASON


class TestHelpers:
    """Tests for the visibility helpers."""

    def test_missing_symbol_is_public(self) -> None:
        assert symbol_visibility(None) is Visibility.PUBLIC

    def test_symbol_visibility(self) -> None:
        entity = SymbolEntity(EntityKind.CLASS, "P", Span(0, 0, 1, 1, 1), visibility=Visibility.PROTECTED)
        assert symbol_visibility(entity) is Visibility.PROTECTED

    def test_same_directory_normalises(self) -> None:
        assert same_directory(ROOT / "lib" / "a.pf", ROOT / "lib" / ".." / "lib" / "b.pf")
        assert not same_directory(ROOT / "a.pf", ROOT / "lib" / "b.pf")
