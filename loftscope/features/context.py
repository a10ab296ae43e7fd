"""Per-request analysis context shared by the consumers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loftscope.core.graph import HierarchyGraph
from loftscope.core.models import (
    EntityKind,
    ImportDeclaration,
    Member,
    MemberKind,
    SymbolEntity,
    TypeKind,
    TypeRef,
    Visibility,
)
from loftscope.features.builtins import BUILTIN_MEMBERS
from loftscope.languages.inference import BUILTIN_TYPES, resolve_annotation

if TYPE_CHECKING:
    from loftscope.core.cache import SessionCache
    from loftscope.core.resolver import ImportResolver
    from loftscope.features.models import Document
    from loftscope.languages.models import SourceFile

_RECEIVER_RE = re.compile(r"([A-Za-z_]\w*(?:\s*\.\s*[A-Za-z_]\w*)*)\s*\.\s*$")


def offset_at(text: str, line: int, column: int) -> int:
    """Offset of a 1-based line/column, clamped to the text."""
    offset = 0
    for _ in range(line - 1):
        newline = text.find("\n", offset)
        if newline == -1:
            return len(text)
        offset = newline + 1
    line_end = text.find("\n", offset)
    if line_end == -1:
        line_end = len(text)
    return min(offset + max(column - 1, 0), line_end)


def load_source(document: Document, cache: SessionCache) -> SourceFile | None:
    """Model for a request's text, reusing the cached model when it holds the same text."""
    return cache.get(document.path, document.text)


def position_at(text: str, offset: int) -> tuple[int, int]:
    """1-based (line, column) of an offset."""
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    return line, offset - (text.rfind("\n", 0, offset) + 1) + 1


def leading_comment(source: SourceFile, line: int) -> str | None:
    """Body of the comment block directly above ``line``, blank lines skipped."""
    lines = source.lines
    by_end = {comment.end_line: comment for comment in source.lex.comments}
    current = line - 1
    while 1 <= current <= len(lines) and not lines[current - 1].strip():
        current -= 1

    parts = []
    while current in by_end:
        comment = by_end[current]
        if not lines[comment.line - 1].strip().startswith(("//", "/*")):
            break
        parts.append(comment.body)
        current = comment.line - 1
    if not parts:
        return None
    return "\n".join(reversed(parts))


def word_at(text: str, offset: int) -> tuple[str, int, int] | None:
    """Identifier touching ``offset`` with its start and end offsets."""
    start = offset
    while start > 0 and (text[start - 1].isalnum() or text[start - 1] == "_"):
        start -= 1
    end = offset
    while end < len(text) and (text[end].isalnum() or text[end] == "_"):
        end += 1
    if start == end or text[start].isdigit():
        return None
    return text[start:end], start, end


def receiver_before(text: str, offset: int) -> list[str] | None:
    """Dotted receiver ending at ``offset``: ``d.owner.`` gives ``["d", "owner"]``."""
    line_start = text.rfind("\n", 0, offset) + 1
    match = _RECEIVER_RE.search(text[line_start:offset])
    if match is None:
        return None
    return [part.strip() for part in match.group(1).split(".")]


@dataclass(frozen=True)
class Receiver:
    """What sits left of a dot: an entity (instance or static side) or a builtin type."""

    entity: SymbolEntity | None = None
    builtin: str | None = None
    static: bool = False


@dataclass(frozen=True)
class ImportedSymbolInfo:
    name: str
    declaration: ImportDeclaration
    target: SourceFile
    symbol: SymbolEntity | Member | None


class AnalysisContext:
    """Entities visible from one file: its own plus what it imports.

    The hierarchy graph covers every entity of every imported file so that
    parent chains crossing files resolve. Name lookups only see local and
    explicitly imported symbols first.
    """

    def __init__(self, source: SourceFile, resolver: ImportResolver) -> None:
        self.source = source
        self.resolver = resolver
        self.imports = resolver.resolve_imports(source)
        self.imported: dict[str, ImportedSymbolInfo] = {}

        entities = list(source.entities)
        for decl in self.imports:
            if decl.resolved_path is None:
                continue
            target = resolver.cache.get(decl.resolved_path)
            if target is None:
                continue
            entities.extend(target.entities)
            for name in decl.names:
                symbol = target.entity_index.get(name) or target.functions.get(name)
                self.imported.setdefault(name, ImportedSymbolInfo(name, decl, target, symbol))
        self.graph = HierarchyGraph.build(entities)

    @property
    def known_entities(self) -> set[str]:
        return set(self.graph.entities)

    def lookup_entity(self, name: str) -> SymbolEntity | None:
        local = self.source.entity_index.get(name)
        if local is not None:
            return local
        info = self.imported.get(name)
        if info is not None and isinstance(info.symbol, SymbolEntity):
            return info.symbol
        return self.graph.get_entity(name)

    def binding(self, name: str) -> TypeRef:
        return self.source.bindings.get(name, TypeRef.unknown())

    def members_of(self, entity_name: str) -> list[Member]:
        return self.graph.inherited_members(entity_name)

    def source_of(self, entity: SymbolEntity) -> SourceFile | None:
        if entity.file is None or entity.file == self.source.path:
            return self.source
        return self.resolver.cache.get(entity.file)

    def owner_of(self, member: Member) -> SymbolEntity | None:
        return self.graph.get_entity(member.owner)

    def enclosing_member(self, name: str, offset: int) -> Member | None:
        """Member ``name`` of the entity around ``offset``, inherited ones included."""
        entity = self.source.entity_at(offset)
        if entity is None:
            return None
        for member in self.members_of(entity.name):
            if member.name == name:
                return member
        return None

    def declared_here(self, member: Member) -> bool:
        owner = self.graph.get_entity(member.owner)
        return owner is not None and owner.file == self.source.path

    def receiver_for_type(self, type_ref: TypeRef) -> Receiver | None:
        if type_ref.kind is TypeKind.ENTITY and type_ref.base:
            entity = self.lookup_entity(type_ref.base)
            return Receiver(entity=entity) if entity is not None else None
        if type_ref.kind is TypeKind.BUILTIN and type_ref.base:
            return Receiver(builtin=type_ref.base)
        return None

    def resolve_receiver(self, parts: list[str], offset: int) -> Receiver | None:
        """Follow a dotted chain through field types and method return types."""
        head, rest = parts[0], parts[1:]
        receiver: Receiver | None
        if head == "this":
            entity = self.source.entity_at(offset)
            receiver = Receiver(entity=entity) if entity is not None else None
        else:
            receiver = self.receiver_for_type(self.binding(head))
            if receiver is None:
                entity = self.lookup_entity(head)
                if entity is not None:
                    receiver = Receiver(entity=entity, static=True)
                elif head in BUILTIN_TYPES:
                    receiver = Receiver(builtin=head, static=True)

        for part in rest:
            if receiver is None:
                return None
            receiver = self._step(receiver, part)
        return receiver

    def _step(self, receiver: Receiver, name: str) -> Receiver | None:
        entity = receiver.entity
        if entity is None:
            return None
        if receiver.static and entity.kind is EntityKind.ENUM:
            value = entity.get_member(name)
            if value is not None and value.kind is MemberKind.ENUM_VALUE:
                return Receiver(entity=entity)
        member = self.find_member(receiver, name)
        if member is None:
            return None
        type_text = member.type if member.kind is MemberKind.FIELD else member.return_type
        if not type_text:
            return None
        return self.receiver_for_type(resolve_annotation(type_text))

    def receiver_members(self, receiver: Receiver) -> list[Member]:
        """Members reachable through ``receiver.``, visibility applied."""
        if receiver.entity is None:
            return list(BUILTIN_MEMBERS.get(receiver.builtin or "", []))

        members = []
        for member in self.members_of(receiver.entity.name):
            if receiver.static:
                if not (member.is_static or member.kind is MemberKind.ENUM_VALUE):
                    continue
            elif member.is_static or member.kind in (MemberKind.CONSTRUCTOR, MemberKind.ENUM_VALUE):
                continue
            if member.visibility is Visibility.PRIVATE and not self.declared_here(member):
                continue
            members.append(member)
        return members

    def find_member(self, receiver: Receiver, name: str) -> Member | None:
        for member in self.receiver_members(receiver):
            if member.name == name:
                return member
        return None
