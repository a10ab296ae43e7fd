"""
Editor-facing consumers of the semantic model.

Each consumer takes a Document (path plus current text), a SessionCache and
an ImportResolver, and returns plain result objects:
    - complete: CompletionItem list for a cursor offset
    - hover: HoverInfo for the identifier at an offset
    - find_definition: Location of a declaration
    - lint: Diagnostic list sorted by position

None of them raise on malformed source.
"""

from loftscope.features.completion import complete
from loftscope.features.context import AnalysisContext, offset_at, position_at
from loftscope.features.definition import find_definition
from loftscope.features.hover import hover
from loftscope.features.linter import lint
from loftscope.features.models import (
    CompletionItem,
    CompletionKind,
    Diagnostic,
    Document,
    HoverInfo,
    Location,
    Range,
    Severity,
)

__all__ = [
    "complete",
    "hover",
    "find_definition",
    "lint",
    "AnalysisContext",
    "offset_at",
    "position_at",
    "CompletionItem",
    "CompletionKind",
    "Diagnostic",
    "Document",
    "HoverInfo",
    "Location",
    "Range",
    "Severity",
]
