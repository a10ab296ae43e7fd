"""Result types handed to editor-facing consumers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from loftscope.languages.models import Token


@dataclass(frozen=True)
class Document:
    """A request's view of one file: its path and current text."""

    path: Path
    text: str


class Severity(Enum):
    """Diagnostic severity levels."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    HINT = "hint"


class CompletionKind(Enum):
    KEYWORD = "keyword"
    SNIPPET = "snippet"
    TYPE = "type"
    CLASS = "class"
    ENUM = "enum"
    STRUCT = "struct"
    INTERFACE = "interface"
    FUNCTION = "function"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    FIELD = "field"
    ENUM_MEMBER = "enumMember"
    VARIABLE = "variable"


@dataclass(frozen=True)
class CompletionItem:
    name: str
    kind: CompletionKind
    detail: str | None = None
    insert_text: str | None = None
    documentation: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "detail": self.detail,
            "insert_text": self.insert_text or self.name,
            "documentation": self.documentation,
        }


@dataclass(frozen=True)
class HoverInfo:
    kind: str
    signature: str
    documentation: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "signature": self.signature, "documentation": self.documentation}


@dataclass(frozen=True)
class Location:
    """A position in a file. Line and column are 1-based."""

    file_path: Path
    line: int
    column: int

    def to_dict(self) -> dict[str, Any]:
        return {"file_path": str(self.file_path), "line": self.line, "column": self.column}


@dataclass(frozen=True)
class Range:
    """Text range, 1-based; ``end_column`` is exclusive."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @classmethod
    def of_tokens(cls, first: Token, last: Token | None = None) -> Range:
        last = last or first
        return cls(first.line, first.column, last.line, last.end_column)

    @classmethod
    def of_line(cls, line: int, column: int = 1, length: int = 1) -> Range:
        return cls(line, column, line, column + max(length, 1))

    def to_dict(self) -> dict[str, int]:
        return {
            "start_line": self.start_line,
            "start_column": self.start_column,
            "end_line": self.end_line,
            "end_column": self.end_column,
        }


@dataclass(frozen=True)
class Diagnostic:
    """A lint finding."""

    range: Range
    severity: Severity
    message: str
    code: str

    @property
    def line(self) -> int:
        return self.range.start_line

    def to_dict(self) -> dict[str, Any]:
        return {
            "range": self.range.to_dict(),
            "severity": self.severity.value,
            "message": self.message,
            "code": self.code,
        }
