"""Keyword tables and token-level helpers shared by the Polyloft passes."""

from __future__ import annotations

from collections.abc import Sequence

from loftscope.core.models import Visibility
from loftscope.languages.models import Token, TokenType

ENTITY_KEYWORDS = frozenset({"class", "enum", "record", "interface"})
DECLARATORS = frozenset({"var", "let", "const", "final"})
VISIBILITY_MODIFIERS = {
    "public": Visibility.PUBLIC,
    "pub": Visibility.PUBLIC,
    "protected": Visibility.PROTECTED,
    "prot": Visibility.PROTECTED,
    "private": Visibility.PRIVATE,
    "priv": Visibility.PRIVATE,
}
MODIFIERS = frozenset(VISIBILITY_MODIFIERS) | {"static", "sealed", "abstract"}
BLOCK_KEYWORDS = frozenset({"if", "for", "loop", "while", "try", "switch"})
CONTINUATION_KEYWORDS = frozenset({"elif", "else", "catch", "finally", "case", "default"})
LOOP_KEYWORDS = frozenset({"for", "loop", "while"})
FUNCTION_BLOCKS = frozenset({"def", "constructor", "do"})

KEYWORDS = (
    ENTITY_KEYWORDS
    | DECLARATORS
    | MODIFIERS
    | BLOCK_KEYWORDS
    | CONTINUATION_KEYWORDS
    | {
        "def", "end", "do", "return", "break", "continue", "import", "implements",
        "extends", "this", "super", "true", "false", "nil", "null", "in", "where",
        "thread", "spawn", "join", "throw", "defer", "and", "or", "not", "is",
    }
)

# Words that begin a new statement even inside unbalanced brackets.
STATEMENT_KEYWORDS = (
    ENTITY_KEYWORDS
    | DECLARATORS
    | MODIFIERS
    | BLOCK_KEYWORDS
    | {"def", "end", "import", "return", "break", "continue", "elif", "else", "catch", "finally"}
)


def read_prefix(tokens: Sequence[Token], start: int = 0) -> tuple[int, list[str], list[str]]:
    """Skip annotations and modifiers at the start of a statement.

    Returns the index of the first remaining token, the annotation names and
    the modifier words in source order.
    """
    annotations: list[str] = []
    modifiers: list[str] = []
    i = start
    n = len(tokens)
    while i < n:
        token = tokens[i]
        if token.is_op("@") and i + 1 < n and tokens[i + 1].type is TokenType.NAME:
            annotations.append(tokens[i + 1].value)
            i += 2
            if i < n and tokens[i].is_op("("):
                close = match_bracket(tokens, i)
                i = n if close is None else close + 1
            continue
        if token.is_name(*MODIFIERS) and i + 1 < n and tokens[i + 1].type is TokenType.NAME:
            modifiers.append(token.value)
            i += 1
            continue
        break
    return i, annotations, modifiers


def visibility_of(modifiers: Sequence[str]) -> Visibility:
    """Last visibility word wins; no word means public."""
    visibility = Visibility.PUBLIC
    for word in modifiers:
        if word in VISIBILITY_MODIFIERS:
            visibility = VISIBILITY_MODIFIERS[word]
    return visibility


def match_bracket(tokens: Sequence[Token], index: int) -> int | None:
    """Index of the bracket closing the one at ``index``, or None."""
    pairs = {"(": ")", "[": "]", "{": "}"}
    opener = tokens[index].value
    closer = pairs[opener]
    depth = 0
    for i in range(index, len(tokens)):
        token = tokens[i]
        if token.type is not TokenType.OP:
            continue
        if token.value == opener:
            depth += 1
        elif token.value == closer:
            depth -= 1
            if depth == 0:
                return i
    return None


def find_op(tokens: Sequence[Token], value: str, start: int = 0) -> int | None:
    """Index of the first ``value`` operator at bracket depth zero."""
    depth = 0
    for i in range(start, len(tokens)):
        token = tokens[i]
        if token.type is not TokenType.OP:
            continue
        if token.value in "([{" and len(token.value) == 1:
            depth += 1
        elif token.value in ")]}" and len(token.value) == 1:
            depth -= 1
        elif depth == 0 and token.value == value:
            return i
    return None


def split_commas(tokens: Sequence[Token]) -> list[list[Token]]:
    """Split a token run on top-level commas."""
    parts: list[list[Token]] = [[]]
    depth = 0
    for token in tokens:
        if token.type is TokenType.OP:
            if token.value in ("(", "[", "{"):
                depth += 1
            elif token.value in (")", "]", "}"):
                depth -= 1
            elif token.value == "," and depth == 0:
                parts.append([])
                continue
        parts[-1].append(token)
    return [part for part in parts if part]


def render(tokens: Sequence[Token]) -> str:
    """Rebuild readable source text from tokens."""
    out: list[str] = []
    prev: Token | None = None
    for token in tokens:
        if prev is not None and _needs_space(prev, token):
            out.append(" ")
        out.append(token.value)
        prev = token
    return "".join(out)


def _needs_space(prev: Token, token: Token) -> bool:
    if prev.is_op(","):
        return True
    if prev.is_op("->", "=>", "=") or token.is_op("->", "=>", "="):
        return True
    return prev.type is not TokenType.OP and token.type is not TokenType.OP
