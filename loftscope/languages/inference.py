"""Type inference for variable declarations.

Bindings are kept in one flat map per file. A name declared again, even in
another block, replaces the earlier binding.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping, Sequence
from dataclasses import dataclass

from loftscope.core.models import TypeRef
from loftscope.languages.lexer import split_statements, tokenize
from loftscope.languages.models import Declaration, Statement, Token, TokenType
from loftscope.languages.syntax import DECLARATORS, KEYWORDS, find_op, match_bracket, read_prefix, render

BUILTIN_TYPES = frozenset(
    {
        "String", "Int", "Float", "Double", "Bool", "Void", "Any", "Array", "Map", "List",
        "Set", "Deque", "Tuple", "Pair", "Range", "Bytes", "Function", "Promise",
        "CompletableFuture", "Channel", "Thread",
    }
)


@dataclass(frozen=True)
class DeclarationSyntax:
    """The pieces of a declaration statement before any typing."""

    declarators: tuple[str, ...]
    name: Token
    annotation: str | None
    value: tuple[Token, ...]


def parse_declaration(tokens: Sequence[Token]) -> DeclarationSyntax | None:
    i, _, _ = read_prefix(tokens)
    n = len(tokens)
    declarators: list[str] = []
    while i < n and tokens[i].is_name(*DECLARATORS):
        declarators.append(tokens[i].value)
        i += 1
    if not declarators or i >= n or tokens[i].type is not TokenType.NAME or tokens[i].value in KEYWORDS:
        return None
    name = tokens[i]
    i += 1

    annotation = None
    if i < n and tokens[i].is_op(":"):
        eq = find_op(tokens, "=", i + 1)
        stop = n if eq is None else eq
        annotation = render(tokens[i + 1 : stop]) or None
        i = stop
    value: tuple[Token, ...] = ()
    if i < n and tokens[i].is_op("="):
        value = tuple(tokens[i + 1 :])
    return DeclarationSyntax(tuple(declarators), name, annotation, value)


def resolve_annotation(annotation: str) -> TypeRef:
    """Builtin names are builtin types; anything else names an entity."""
    ref = TypeRef.entity(annotation)
    if ref.base in BUILTIN_TYPES:
        return TypeRef.builtin(annotation)
    return ref


def infer_expression(
    tokens: Sequence[Token],
    known_entities: Collection[str],
    bindings: Mapping[str, TypeRef] | None = None,
) -> TypeRef:
    """Infer the type of an initializer expression, or Unknown."""
    n = len(tokens)
    if n == 0:
        return TypeRef.unknown()
    if find_op(tokens, "=>") is not None:
        return TypeRef.function()

    first = tokens[0]
    if n == 2 and first.is_op("-", "+") and tokens[1].type is TokenType.NUMBER:
        first, n = tokens[1], 1
    if n == 1:
        if first.type is TokenType.NUMBER:
            is_float = "." in first.value or "e" in first.value.lower()
            return TypeRef.builtin("Float" if is_float else "Int")
        if first.type is TokenType.STRING:
            return TypeRef.builtin("String")
        if first.is_name("true", "false"):
            return TypeRef.builtin("Bool")
        if bindings is not None and first.type is TokenType.NAME and first.value in bindings:
            return bindings[first.value]
        return TypeRef.unknown()

    if first.is_op("[", "{") and match_bracket(tokens, 0) == n - 1:
        return TypeRef.builtin("Array" if first.value == "[" else "Map")

    if (
        first.type is TokenType.NAME
        and tokens[1].is_op("(")
        and match_bracket(tokens, 1) == n - 1
        and first.value in known_entities
    ):
        return TypeRef.entity(first.value)
    return TypeRef.unknown()


def collect_declarations(statements: Iterable[Statement], known_entities: Iterable[str]) -> list[Declaration]:
    """Type every declaration statement in order.

    An explicit annotation always wins over the initializer.
    """
    known = frozenset(known_entities)
    bindings: dict[str, TypeRef] = {}
    declarations: list[Declaration] = []
    for statement in statements:
        syntax = parse_declaration(statement.tokens)
        if syntax is None:
            continue
        inferred = infer_expression(syntax.value, known, bindings)
        declared = resolve_annotation(syntax.annotation) if syntax.annotation else inferred
        bindings[syntax.name.value] = declared
        declarations.append(
            Declaration(
                name=syntax.name.value,
                declarators=syntax.declarators,
                annotation=syntax.annotation,
                value=syntax.value,
                line=syntax.name.line,
                column=syntax.name.column,
                type=declared,
                inferred=inferred,
                statement=statement,
            )
        )
    return declarations


def infer_bindings(text: str, known_entities: Iterable[str]) -> dict[str, TypeRef]:
    """Map each declared variable in ``text`` to its type."""
    statements = split_statements(tokenize(text).tokens)
    return {d.name: d.type for d in collect_declarations(statements, known_entities)}
