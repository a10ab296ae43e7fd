"""Entity extraction: class, enum, record and interface blocks."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from loftscope.core.models import EntityKind, Parameter, Span, SymbolEntity
from loftscope.languages.blocks import walk_blocks
from loftscope.languages.lexer import split_statements, tokenize
from loftscope.languages.members import parse_parameters
from loftscope.languages.models import Block, BlockStructure, Token, TokenType
from loftscope.languages.syntax import ENTITY_KEYWORDS, match_bracket, read_prefix, visibility_of


@dataclass
class _Header:
    keyword: str
    name: str
    modifiers: list[str]
    parent: str | None = None
    interfaces: list[str] = field(default_factory=list)
    components: list[Parameter] = field(default_factory=list)
    end: Token | None = None


def _parse_header(tokens: Sequence[Token]) -> _Header | None:
    i, _, modifiers = read_prefix(tokens)
    n = len(tokens)
    if i + 1 >= n or not tokens[i].is_name(*ENTITY_KEYWORDS) or tokens[i + 1].type is not TokenType.NAME:
        return None
    header = _Header(tokens[i].value, tokens[i + 1].value, modifiers, end=tokens[i + 1])
    j = i + 2

    if j < n and tokens[j].is_op("(", "["):
        close = match_bracket(tokens, j)
        stop = n if close is None else close
        if tokens[j].is_op("(") and header.keyword == "record":
            header.components = parse_parameters(tokens[j + 1 : stop])
        header.end = tokens[stop - 1] if close is None else tokens[close]
        j = stop + 1

    if j + 1 < n and (tokens[j].is_op("<") or tokens[j].is_name("extends")):
        if tokens[j + 1].type is TokenType.NAME:
            header.parent = tokens[j + 1].value
            header.end = tokens[j + 1]
        j += 2

    if j < n and tokens[j].is_name("implements"):
        header.end = tokens[j]
        j += 1
        while j < n and tokens[j].type is TokenType.NAME:
            header.interfaces.append(tokens[j].value)
            header.end = tokens[j]
            j += 1
            if j < n and tokens[j].is_op(","):
                j += 1
            else:
                break

    if j < n and tokens[j].is_op(":"):
        header.end = tokens[j]
    return header


def _enclosing_block(block: Block) -> Block | None:
    parent = block.parent
    while parent is not None and parent.keyword not in ENTITY_KEYWORDS:
        parent = parent.parent
    return parent


def extract_entities(text: str, *, structure: BlockStructure | None = None) -> list[SymbolEntity]:
    """Extract every declaration block in ``text``, nested ones included.

    A block missing its ``end`` runs to the end of the text. When a name is
    declared twice the first declaration is kept.

    Members are not filled in here; see ``parse_members``.
    """
    if structure is None:
        structure = walk_blocks(split_statements(tokenize(text).tokens))

    headers: dict[int, _Header] = {}
    entities: list[SymbolEntity] = []
    seen: set[str] = set()
    total_lines = text.count("\n") + 1

    for block in structure.blocks:
        if block.keyword not in ENTITY_KEYWORDS:
            continue
        header = _parse_header(block.header.tokens)
        if header is None:
            continue
        headers[id(block)] = header
        if header.name in seen:
            continue
        seen.add(header.name)

        first = block.header.first
        body_from = header.end or block.start
        if block.end_token is not None:
            end, end_line, body_end = block.end_token.end, block.end_token.line, block.end_token.offset
        else:
            end, end_line, body_end = len(text), total_lines, len(text)

        outer = headers.get(id(_enclosing_block(block)))
        entities.append(
            SymbolEntity(
                kind=EntityKind(header.keyword),
                name=header.name,
                span=Span(first.offset, end, first.line, first.column, end_line),
                visibility=visibility_of(header.modifiers),
                modifiers=frozenset(m for m in header.modifiers if m in ("static", "sealed", "abstract")),
                parent=header.parent,
                interfaces=tuple(header.interfaces),
                components=header.components,
                enclosing=outer.name if outer is not None else None,
                terminated=block.end_token is not None,
                body_start=body_from.end,
                body_end=max(body_end, body_from.end),
                body_line=body_from.line,
                body_column=body_from.end_column,
            )
        )
    return entities
