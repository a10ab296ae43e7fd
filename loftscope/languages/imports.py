"""Import statement parsing."""

from __future__ import annotations

from collections.abc import Iterable

from loftscope.core.models import ImportDeclaration, ImportedSymbol
from loftscope.languages.models import Statement, TokenType
from loftscope.languages.syntax import match_bracket


def module_path(module: str) -> str:
    """Turn ``a.b.c`` into ``a/b/c``; path-style references are kept as they are."""
    if "/" in module:
        return module
    return module.replace(".", "/")


def parse_import(statement: Statement) -> ImportDeclaration | None:
    """Parse ``import a.b.c { X, Y }`` (braces optional)."""
    tokens = statement.tokens
    if not tokens[0].is_name("import") or len(tokens) < 2:
        return None

    parts: list[str] = []
    i = 1
    while i < len(tokens) and not tokens[i].is_op("{"):
        parts.append(tokens[i].value)
        i += 1
    module = "".join(parts)
    if not module:
        return None

    symbols: list[ImportedSymbol] = []
    if i < len(tokens):
        close = match_bracket(tokens, i)
        inner = tokens[i + 1 : close if close is not None else len(tokens)]
        for token in inner:
            if token.type is TokenType.NAME:
                symbols.append(ImportedSymbol(token.value, token.line, token.column))

    return ImportDeclaration(
        module=module,
        symbols=tuple(symbols),
        line=statement.line,
        column=statement.first.column,
        end_line=statement.last.line,
    )


def parse_imports(statements: Iterable[Statement]) -> list[ImportDeclaration]:
    return [decl for decl in (parse_import(s) for s in statements) if decl is not None]
