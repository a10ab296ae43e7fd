"""Block structure of a statement stream.

Polyloft blocks open with a header (``class X:``, ``def f():``, ``if c:``,
``Name(params):``) or a ``do`` and close with ``end``. The walker pairs them
up and records, for every statement, which blocks enclose it.
"""

from __future__ import annotations

from collections.abc import Sequence

from loftscope.languages.models import Block, BlockStructure, Statement, StatementContext, Token, TokenType
from loftscope.languages.syntax import (
    BLOCK_KEYWORDS,
    ENTITY_KEYWORDS,
    KEYWORDS,
    match_bracket,
    read_prefix,
)


def header_keyword(tokens: Sequence[Token]) -> tuple[str, int] | None:
    """Return the keyword of the block a statement header opens and its index.

    Constructor headers (``Name(params):``) report ``"constructor"``.
    """
    i, _, _ = read_prefix(tokens)
    n = len(tokens)
    if i >= n or tokens[i].type is not TokenType.NAME:
        return None
    head = tokens[i]
    nxt = tokens[i + 1] if i + 1 < n else None

    if head.value in ENTITY_KEYWORDS:
        if nxt is not None and nxt.type is TokenType.NAME:
            return head.value, i
        return None
    if head.value in BLOCK_KEYWORDS:
        return head.value, i
    if head.value == "def":
        return ("def", i) if _def_has_body(tokens, i + 1) else None
    if head.value not in KEYWORDS and nxt is not None and nxt.is_op("("):
        close = match_bracket(tokens, i + 1)
        if close is not None and close + 1 < n and tokens[close + 1].is_op(":"):
            return "constructor", i
    return None


def _def_has_body(tokens: Sequence[Token], index: int) -> bool:
    n = len(tokens)
    if index < n and tokens[index].is_op("::"):
        index += 1
    if index + 1 >= n or tokens[index].type is not TokenType.NAME or not tokens[index + 1].is_op("("):
        return False
    close = match_bracket(tokens, index + 1)
    if close is None:
        return False
    depth = 0
    for token in tokens[close + 1 :]:
        if token.is_op("(", "[", "{"):
            depth += 1
        elif token.is_op(")", "]", "}"):
            depth -= 1
        elif depth == 0 and token.is_op(":"):
            return True
    return False


def _is_keyword_use(tokens: Sequence[Token], index: int, word: str) -> bool:
    token = tokens[index]
    if not token.is_name(word):
        return False
    return index == 0 or not tokens[index - 1].is_op(".", "::")


def walk_blocks(statements: Sequence[Statement]) -> BlockStructure:
    """Pair block openers with ``end`` and record each statement's nesting."""
    stack: list[Block] = []
    blocks: list[Block] = []
    contexts: list[StatementContext] = []
    stray_ends: list[Token] = []

    for statement in statements:
        enclosing = tuple(stack)
        opened: list[Block] = []
        tokens = statement.tokens

        header = header_keyword(tokens)
        scan_from = 0
        if header is not None:
            keyword, index = header
            block = Block(keyword, statement, tokens[index], parent=stack[-1] if stack else None)
            stack.append(block)
            blocks.append(block)
            opened.append(block)
            scan_from = index + 1

        for i in range(scan_from, len(tokens)):
            if _is_keyword_use(tokens, i, "do"):
                block = Block("do", statement, tokens[i], parent=stack[-1] if stack else None)
                stack.append(block)
                blocks.append(block)
                opened.append(block)
            elif _is_keyword_use(tokens, i, "end"):
                if stack:
                    stack.pop().end_token = tokens[i]
                else:
                    stray_ends.append(tokens[i])

        contexts.append(StatementContext(statement, enclosing, tuple(opened)))

    return BlockStructure(contexts=contexts, blocks=blocks, unclosed=list(stack), stray_ends=stray_ends)
