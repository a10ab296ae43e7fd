"""Import visibility rules."""

from __future__ import annotations

from pathlib import Path

from loftscope.core.models import Member, SymbolEntity, Visibility, VisibilityDecision

PRIVATE_REASON = "private symbols cannot be imported"
PROTECTED_REASON = "protected symbols can only be imported from the same folder"


def symbol_visibility(symbol: SymbolEntity | Member | None) -> Visibility:
    """Visibility of an importable symbol; missing symbols count as public."""
    if symbol is None:
        return Visibility.PUBLIC
    return symbol.visibility


def same_directory(a: Path, b: Path) -> bool:
    return Path(a).resolve().parent == Path(b).resolve().parent


def can_import(importer: Path, imported: Path, visibility: Visibility) -> VisibilityDecision:
    """Decide whether ``importer`` may import a symbol of ``visibility`` from ``imported``."""
    if visibility is Visibility.PRIVATE:
        return VisibilityDecision(False, PRIVATE_REASON)
    if visibility is Visibility.PROTECTED and not same_directory(importer, imported):
        return VisibilityDecision(False, PROTECTED_REASON)
    return VisibilityDecision(True)
