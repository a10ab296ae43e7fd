"""Tokenizer for Polyloft source.

Comments and string literals are taken out first so that keywords inside them
never reach the structural passes. The rest of the front end only ever sees
the token stream.
"""

from __future__ import annotations

import re

from loftscope.languages.models import Comment, LexResult, Statement, Token, TokenType
from loftscope.languages.syntax import STATEMENT_KEYWORDS

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>[ \t\r\f\v]+)
  | (?P<newline>\n)
  | (?P<line_comment>//[^\n]*)
  | (?P<block_comment>/\*.*?(?:\*/|\Z))
  | (?P<string>"(?:\\[^\n]|[^"\\\n])*")
  | (?P<open_string>"(?:\\[^\n]|[^"\\\n])*)
  | (?P<char>'(?:\\[^\n]|[^'\\\n])*')
  | (?P<open_char>'(?:\\[^\n]|[^'\\\n])*)
  | (?P<number>\d[\d_]*(?:\.\d[\d_]*)?(?:[eE][+-]?\d+)?)
  | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<op>\.\.\.|\.\.|->|=>|::|==|!=|<=|>=|&&|\|\||\+=|-=|\*=|/=|%=|\+\+|--
        |[-+*/%=<>!&|^~?:.,;()\[\]{}@\#$])
  | (?P<other>.)
    """,
    re.VERBOSE | re.DOTALL,
)

_OPENERS = frozenset("([{")
_CLOSERS = frozenset(")]}")


def tokenize(text: str, line: int = 1, column: int = 1, offset: int = 0) -> LexResult:
    """Tokenize ``text``.

    ``line``, ``column`` and ``offset`` give the position of ``text[0]`` in a
    larger document, so a slice can be tokenized with absolute positions.
    """
    result = LexResult(tokens=[])
    line_start = -(column - 1)

    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup
        value = match.group()
        start = match.start()
        col = start - line_start + 1

        if kind == "newline":
            result.tokens.append(Token(TokenType.NEWLINE, value, line, col, offset + start))
            line += 1
            line_start = match.end()
            continue
        if kind == "ws":
            continue
        if kind in ("line_comment", "block_comment"):
            newlines = value.count("\n")
            result.comments.append(
                Comment(value, line, line + newlines, offset + start, block=kind == "block_comment")
            )
            if newlines:
                line += newlines
                line_start = start + value.rindex("\n") + 1
            continue

        if kind in ("string", "char", "open_string", "open_char"):
            token = Token(TokenType.STRING, value, line, col, offset + start)
            if kind.startswith("open_"):
                result.unclosed_strings.append(token)
        elif kind == "number":
            token = Token(TokenType.NUMBER, value, line, col, offset + start)
        elif kind == "name":
            token = Token(TokenType.NAME, value, line, col, offset + start)
        else:
            token = Token(TokenType.OP, value, line, col, offset + start)
        result.tokens.append(token)

    return result


def split_statements(tokens: list[Token]) -> list[Statement]:
    """Group tokens into logical statements.

    A newline only ends a statement outside brackets, which lets headers and
    argument lists span several lines. A newline inside brackets followed by
    a statement keyword still ends the statement, so one unclosed ``(`` does
    not swallow the rest of the file.
    """
    statements: list[Statement] = []
    current: list[Token] = []
    depth = 0

    for i, token in enumerate(tokens):
        if token.type is TokenType.NEWLINE:
            if depth > 0 and not _starts_statement(tokens, i + 1):
                continue
            if current:
                statements.append(Statement(tuple(current)))
                current = []
            depth = 0
            continue
        if token.type is TokenType.OP:
            if token.value in _OPENERS:
                depth += 1
            elif token.value in _CLOSERS:
                depth = max(0, depth - 1)
        current.append(token)

    if current:
        statements.append(Statement(tuple(current)))
    return statements


def _starts_statement(tokens: list[Token], index: int) -> bool:
    if index >= len(tokens):
        return True
    token = tokens[index]
    return token.type is TokenType.NAME and token.value in STATEMENT_KEYWORDS
