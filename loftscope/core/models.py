"""Data models for the Polyloft semantic model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class EntityKind(Enum):
    """Kinds of declaration blocks."""

    CLASS = "class"
    ENUM = "enum"
    RECORD = "record"
    INTERFACE = "interface"


class MemberKind(Enum):
    """Kinds of entity members."""

    FIELD = "field"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    ENUM_VALUE = "enumValue"


class Visibility(Enum):
    """Access modifiers. Anything unannotated is public."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class TypeKind(Enum):
    """Variants of an inferred or declared type."""

    BUILTIN = "builtin"
    ENTITY = "entity"
    FUNCTION = "function"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TypeRef:
    """A type as seen by inference and type checks.

    Unknown is its own variant rather than a magic name, so code that wants a
    type name has to check ``is_known`` first.
    """

    kind: TypeKind
    name: str | None = None

    @classmethod
    def builtin(cls, name: str) -> TypeRef:
        return cls(TypeKind.BUILTIN, name)

    @classmethod
    def entity(cls, name: str) -> TypeRef:
        return cls(TypeKind.ENTITY, name)

    @classmethod
    def function(cls) -> TypeRef:
        return cls(TypeKind.FUNCTION, "Function")

    @classmethod
    def unknown(cls) -> TypeRef:
        return cls(TypeKind.UNKNOWN)

    @property
    def is_known(self) -> bool:
        return self.kind is not TypeKind.UNKNOWN

    @property
    def base(self) -> str | None:
        """Name without generic arguments or nullability (``Array[Int]`` -> ``Array``)."""
        if self.name is None:
            return None
        for sep in ("[", "<"):
            if sep in self.name:
                return self.name.split(sep, 1)[0].strip()
        return self.name.rstrip("?").strip()

    def display(self) -> str:
        """Text shown to users; Unknown reads as Any."""
        return self.name if self.is_known and self.name else "Any"


@dataclass(frozen=True)
class Parameter:
    """A method or record component parameter."""

    name: str
    type: str | None = None
    variadic: bool = False
    default: str | None = None

    def render(self) -> str:
        text = f"...{self.name}" if self.variadic else self.name
        if self.type:
            text += f": {self.type}"
        if self.default is not None:
            text += f" = {self.default}"
        return text


@dataclass
class Member:
    """A field, method, constructor, or enum value of an entity."""

    name: str
    kind: MemberKind
    owner: str = ""
    visibility: Visibility = Visibility.PUBLIC
    is_static: bool = False
    is_final: bool = False
    parameters: list[Parameter] = field(default_factory=list)
    return_type: str | None = None
    type: str | None = None
    line: int = 0
    column: int = 0
    synthetic: bool = False

    @property
    def is_callable(self) -> bool:
        return self.kind in (MemberKind.METHOD, MemberKind.CONSTRUCTOR)

    @property
    def signature(self) -> str:
        params = ", ".join(p.render() for p in self.parameters)
        if self.kind is MemberKind.CONSTRUCTOR:
            return f"{self.owner or self.name}({params})"
        if self.kind is MemberKind.METHOD:
            prefix = "static def" if self.is_static else "def"
            return f"{prefix} {self.name}({params}) -> {self.return_type or 'Void'}"
        if self.kind is MemberKind.ENUM_VALUE:
            return f"{self.owner}.{self.name}" if self.owner else self.name
        return f"{self.name}: {self.type or 'Any'}"


@dataclass(frozen=True)
class Span:
    """Source span of a declaration. Offsets are absolute, lines 1-based."""

    start: int
    end: int
    line: int
    column: int
    end_line: int


@dataclass
class SymbolEntity:
    """A class, enum, record, or interface declaration."""

    kind: EntityKind
    name: str
    span: Span
    visibility: Visibility = Visibility.PUBLIC
    modifiers: frozenset[str] = frozenset()
    parent: str | None = None
    interfaces: tuple[str, ...] = ()
    members: list[Member] = field(default_factory=list)
    components: list[Parameter] = field(default_factory=list)
    enclosing: str | None = None
    terminated: bool = True
    body_start: int = 0
    body_end: int = 0
    body_line: int = 1
    body_column: int = 1
    file: Path | None = None

    def get_member(self, name: str) -> Member | None:
        for member in self.members:
            if member.name == name:
                return member
        return None

    def contains(self, offset: int) -> bool:
        return self.span.start <= offset <= self.span.end

    @property
    def signature(self) -> str:
        parts = []
        if self.visibility is not Visibility.PUBLIC:
            parts.append(self.visibility.value)
        parts.extend(sorted(self.modifiers))
        head = f"{self.kind.value} {self.name}"
        if self.kind is EntityKind.RECORD:
            head += "(" + ", ".join(c.render() for c in self.components) + ")"
        parts.append(head)
        if self.parent:
            parts.append(f"< {self.parent}")
        if self.interfaces:
            parts.append("implements " + ", ".join(self.interfaces))
        return " ".join(parts)


@dataclass(frozen=True)
class VisibilityDecision:
    """Outcome of checking one imported symbol's visibility."""

    allowed: bool
    reason: str | None = None


@dataclass(frozen=True)
class ImportedSymbol:
    """One name inside an import's braces."""

    name: str
    line: int
    column: int


@dataclass
class ImportDeclaration:
    """An ``import module { A, B }`` statement."""

    module: str
    symbols: tuple[ImportedSymbol, ...]
    line: int
    column: int
    end_line: int
    resolved_path: Path | None = None
    decisions: dict[str, VisibilityDecision] = field(default_factory=dict)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(s.name for s in self.symbols)

    @property
    def is_resolved(self) -> bool:
        return self.resolved_path is not None


class CacheStats:
    """Counters kept by the session cache."""

    def __init__(self) -> None:
        self.hits: int = 0
        self.misses: int = 0
        self.invalidations: int = 0
        self.errors: list[str] = []

    def __repr__(self) -> str:
        return (
            f"CacheStats(hits={self.hits}, misses={self.misses}, "
            f"invalidations={self.invalidations}, errors={len(self.errors)})"
        )
