"""Data models for the Polyloft front end."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from loftscope.core.models import ImportDeclaration, Member, SymbolEntity, TypeRef


class TokenType(Enum):
    """Token categories produced by the tokenizer."""

    NAME = "name"
    NUMBER = "number"
    STRING = "string"
    OP = "op"
    NEWLINE = "newline"


@dataclass(frozen=True, slots=True)
class Token:
    """A lexical token with its position in the original text."""

    type: TokenType
    value: str
    line: int
    column: int
    offset: int

    @property
    def end(self) -> int:
        return self.offset + len(self.value)

    @property
    def end_column(self) -> int:
        return self.column + len(self.value)

    def is_op(self, *values: str) -> bool:
        return self.type is TokenType.OP and self.value in values

    def is_name(self, *values: str) -> bool:
        return self.type is TokenType.NAME and (not values or self.value in values)


@dataclass(frozen=True)
class Comment:
    """A ``//`` or ``/* */`` comment removed from the token stream."""

    text: str
    line: int
    end_line: int
    offset: int
    block: bool = False

    @property
    def body(self) -> str:
        """Comment text without its delimiters."""
        if not self.block:
            return self.text[2:].strip()
        inner = self.text[2:]
        if inner.endswith("*/"):
            inner = inner[:-2]
        lines = [line.strip().lstrip("*").strip() for line in inner.splitlines()]
        return "\n".join(line for line in lines if line)


@dataclass
class LexResult:
    """Tokens plus the comments and unterminated strings found while lexing."""

    tokens: list[Token]
    comments: list[Comment] = field(default_factory=list)
    unclosed_strings: list[Token] = field(default_factory=list)


@dataclass(frozen=True)
class Statement:
    """A logical line: tokens up to a newline at bracket depth zero."""

    tokens: tuple[Token, ...]

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    @property
    def first(self) -> Token:
        return self.tokens[0]

    @property
    def last(self) -> Token:
        return self.tokens[-1]

    @property
    def line(self) -> int:
        return self.tokens[0].line


@dataclass(eq=False)
class Block:
    """An open/close pair tracked by the block walker."""

    keyword: str
    header: Statement
    start: Token
    parent: Block | None = None
    end_token: Token | None = None

    @property
    def closed(self) -> bool:
        return self.end_token is not None


@dataclass(frozen=True)
class StatementContext:
    """A statement with the blocks enclosing it.

    ``stack`` is the nesting when the statement starts, outermost first.
    ``opened`` lists the blocks the statement itself opens.
    """

    statement: Statement
    stack: tuple[Block, ...]
    opened: tuple[Block, ...] = ()

    @property
    def depth(self) -> int:
        return len(self.stack)

    @property
    def innermost(self) -> Block | None:
        return self.stack[-1] if self.stack else None


@dataclass
class BlockStructure:
    """Everything the block walker learned about a token stream."""

    contexts: list[StatementContext]
    blocks: list[Block]
    unclosed: list[Block]
    stray_ends: list[Token]


@dataclass
class Declaration:
    """A ``let|var|const|final name [: Type] [= expr]`` statement."""

    name: str
    declarators: tuple[str, ...]
    annotation: str | None
    value: tuple[Token, ...]
    line: int
    column: int
    type: TypeRef
    inferred: TypeRef
    statement: Statement | None = None

    @property
    def is_constant(self) -> bool:
        return "const" in self.declarators or "final" in self.declarators


@dataclass
class SourceFile:
    """A parsed Polyloft file and everything derived from one text snapshot."""

    path: Path
    text: str
    token: str
    lex: LexResult
    structure: BlockStructure
    entities: list[SymbolEntity]
    functions: dict[str, Member]
    declarations: list[Declaration]
    bindings: dict[str, TypeRef]
    imports: list[ImportDeclaration]

    @property
    def entity_index(self) -> dict[str, SymbolEntity]:
        return {entity.name: entity for entity in self.entities}

    def entity_at(self, offset: int) -> SymbolEntity | None:
        """Innermost entity whose span contains ``offset``."""
        found = None
        for entity in self.entities:
            if entity.contains(offset) and (found is None or entity.span.start >= found.span.start):
                found = entity
        return found

    @property
    def lines(self) -> list[str]:
        return self.text.splitlines()
