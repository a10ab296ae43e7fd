"""Member parsing for entity bodies."""

from __future__ import annotations

from collections.abc import Sequence

from loftscope.core.models import EntityKind, Member, MemberKind, Parameter, Visibility
from loftscope.languages.blocks import walk_blocks
from loftscope.languages.lexer import split_statements, tokenize
from loftscope.languages.models import Token, TokenType
from loftscope.languages.syntax import (
    DECLARATORS,
    KEYWORDS,
    MODIFIERS,
    find_op,
    match_bracket,
    read_prefix,
    render,
    split_commas,
    visibility_of,
)

ENUM_STATICS = ("valueOf", "values", "size", "names")


def parse_parameters(tokens: Sequence[Token]) -> list[Parameter]:
    """Parse the tokens between a parameter list's parentheses."""
    params: list[Parameter] = []
    for part in split_commas(tokens):
        i = 0
        variadic = False
        if part[0].is_op("..."):
            variadic = True
            i = 1
        while (
            i + 1 < len(part)
            and part[i].is_name(*DECLARATORS, *MODIFIERS)
            and part[i + 1].type is TokenType.NAME
        ):
            i += 1
        if i >= len(part) or part[i].type is not TokenType.NAME:
            continue
        name = part[i].value
        i += 1
        if i < len(part) and part[i].is_op("..."):
            variadic = True
            i += 1

        type_text = None
        default = None
        if i < len(part) and part[i].is_op(":"):
            eq = find_op(part, "=", i + 1)
            stop = len(part) if eq is None else eq
            type_text = render(part[i + 1 : stop]) or None
            i = stop
        if i < len(part) and part[i].is_op("="):
            default = render(part[i + 1 :]) or None
        params.append(Parameter(name, type_text, variadic, default))
    return params


def parse_member_statement(
    tokens: Sequence[Token],
    *,
    entity_name: str = "",
    kind: EntityKind | None = None,
) -> Member | None:
    """Parse one body-level statement into a member, or None if it is not one."""
    i, _, modifiers = read_prefix(tokens)
    n = len(tokens)
    if i >= n or tokens[i].type is not TokenType.NAME:
        return None

    visibility = visibility_of(modifiers)
    is_static = "static" in modifiers
    declarators: list[str] = []
    while i < n and tokens[i].is_name(*DECLARATORS):
        declarators.append(tokens[i].value)
        i += 1
    is_final = "const" in declarators or "final" in declarators
    if i >= n:
        return None
    head = tokens[i]

    if head.is_name("def"):
        return _parse_def(
            tokens, i + 1, entity_name, True,
            visibility=visibility, is_static=is_static, is_final=is_final,
        )

    if declarators:
        if head.type is not TokenType.NAME or head.value in KEYWORDS:
            return None
        type_text = None
        if i + 1 < n and tokens[i + 1].is_op(":"):
            eq = find_op(tokens, "=", i + 2)
            type_text = render(tokens[i + 2 : n if eq is None else eq]) or None
        return Member(
            head.value,
            MemberKind.FIELD,
            owner=entity_name,
            visibility=visibility,
            is_static=is_static,
            is_final=is_final,
            type=type_text,
            line=head.line,
            column=head.column,
        )

    if i + 1 < n and tokens[i + 1].is_op("(") and head.value not in KEYWORDS:
        if entity_name and head.value == entity_name:
            params, _ = _read_params(tokens, i + 1)
            return Member(
                head.value,
                MemberKind.CONSTRUCTOR,
                owner=entity_name,
                visibility=visibility,
                parameters=params,
                line=head.line,
                column=head.column,
            )
        if kind is EntityKind.INTERFACE:
            return _parse_def(tokens, i, entity_name, False, visibility=visibility, is_static=is_static)
    return None


def _read_params(tokens: Sequence[Token], open_index: int) -> tuple[list[Parameter], int]:
    close = match_bracket(tokens, open_index)
    if close is None:
        return parse_parameters(tokens[open_index + 1 :]), len(tokens)
    return parse_parameters(tokens[open_index + 1 : close]), close + 1


def _parse_def(
    tokens: Sequence[Token],
    index: int,
    entity_name: str,
    allow_constructor: bool,
    *,
    visibility: Visibility,
    is_static: bool = False,
    is_final: bool = False,
) -> Member | None:
    n = len(tokens)
    if index < n and tokens[index].is_op("::"):
        is_static = True
        index += 1
    if index >= n or tokens[index].type is not TokenType.NAME:
        return None
    name_token = tokens[index]
    index += 1
    if index >= n or not tokens[index].is_op("("):
        return None
    params, index = _read_params(tokens, index)

    return_type = None
    if index < n and tokens[index].is_op("->"):
        colon = find_op(tokens, ":", index + 1)
        return_type = render(tokens[index + 1 : n if colon is None else colon]) or None

    kind = MemberKind.METHOD
    if allow_constructor and entity_name and name_token.value in (entity_name, "init"):
        kind = MemberKind.CONSTRUCTOR
    return Member(
        name_token.value,
        kind,
        owner=entity_name,
        visibility=visibility,
        is_static=is_static,
        is_final=is_final,
        parameters=params,
        return_type=return_type,
        line=name_token.line,
        column=name_token.column,
    )


def _parse_enum_values(tokens: Sequence[Token]) -> list[Token] | None:
    """``RED``, ``GREEN(0, 255, 0)`` or ``A, B, C``; None if the line is something else."""
    names: list[Token] = []
    i = 0
    n = len(tokens)
    while i < n:
        token = tokens[i]
        if token.type is not TokenType.NAME or token.value in KEYWORDS:
            return None
        names.append(token)
        i += 1
        if i < n and tokens[i].is_op("("):
            close = match_bracket(tokens, i)
            if close is None:
                return None
            i = close + 1
        if i < n:
            if not tokens[i].is_op(",", ";"):
                return None
            i += 1
    return names or None


def _enum_builtins(name: str) -> list[Member]:
    def synth(member_name: str, kind: MemberKind, **kwargs) -> Member:
        return Member(member_name, kind, owner=name, synthetic=True, **kwargs)

    return [
        synth("name", MemberKind.FIELD, type="String", is_final=True),
        synth("ordinal", MemberKind.FIELD, type="Int", is_final=True),
        synth("toString", MemberKind.METHOD, return_type="String"),
        synth(
            "valueOf", MemberKind.METHOD, is_static=True, return_type=name,
            parameters=[Parameter("name", "String")],
        ),
        synth("values", MemberKind.METHOD, is_static=True, return_type=f"Array[{name}]"),
        synth("size", MemberKind.METHOD, is_static=True, return_type="Int"),
        synth("names", MemberKind.METHOD, is_static=True, return_type="Array[String]"),
    ]


def parse_members(
    kind: EntityKind,
    body: str,
    *,
    entity_name: str = "",
    components: Sequence[Parameter] = (),
    line: int = 1,
    column: int = 1,
    offset: int = 0,
) -> list[Member]:
    """Parse the members declared in one entity body.

    ``line``, ``column`` and ``offset`` locate ``body`` inside its file so the
    returned members carry absolute positions. Later members replace earlier
    ones with the same name, except that an enum's synthesized statics always
    stay.
    """
    members: dict[str, Member] = {}
    if kind is EntityKind.ENUM:
        for member in _enum_builtins(entity_name):
            members[member.name] = member
    elif kind is EntityKind.RECORD:
        for component in components:
            members[component.name] = Member(
                component.name,
                MemberKind.FIELD,
                owner=entity_name,
                is_final=True,
                type=component.type,
                line=line,
                column=column,
            )
        members["toString"] = Member(
            "toString", MemberKind.METHOD, owner=entity_name, return_type="String", synthetic=True
        )

    lex = tokenize(body, line=line, column=column, offset=offset)
    structure = walk_blocks(split_statements(lex.tokens))
    accepting_values = kind is EntityKind.ENUM
    constructor: str | None = None

    for context in structure.contexts:
        if context.depth:
            continue
        tokens = context.statement.tokens

        if accepting_values:
            values = _parse_enum_values(tokens)
            if values is not None:
                for token in values:
                    members[token.value] = Member(
                        token.value,
                        MemberKind.ENUM_VALUE,
                        owner=entity_name,
                        is_static=True,
                        is_final=True,
                        type=entity_name,
                        line=token.line,
                        column=token.column,
                    )
                continue
            accepting_values = False

        member = parse_member_statement(tokens, entity_name=entity_name, kind=kind)
        if member is None:
            continue
        if kind is EntityKind.ENUM and member.name in ENUM_STATICS:
            continue
        if member.kind is MemberKind.CONSTRUCTOR:
            # The first constructor spelling wins; redeclaring it keeps the kind.
            if constructor is None:
                constructor = member.name
            elif member.name != constructor:
                member.kind = MemberKind.METHOD
        members[member.name] = member

    return list(members.values())
