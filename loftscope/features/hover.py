"""Hover information for the symbol under the cursor."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loftscope.core.models import EntityKind, Member, MemberKind, SymbolEntity
from loftscope.features.context import (
    AnalysisContext,
    leading_comment,
    load_source,
    position_at,
    receiver_before,
    word_at,
)
from loftscope.features.models import Document, HoverInfo

if TYPE_CHECKING:
    from loftscope.core.cache import SessionCache
    from loftscope.core.resolver import ImportResolver


def _join(*parts: str | None) -> str | None:
    text = "\n\n".join(part for part in parts if part)
    return text or None


def entity_hover(context: AnalysisContext, entity: SymbolEntity, origin: str | None = None) -> HoverInfo:
    values = None
    if entity.kind is EntityKind.ENUM:
        names = [m.name for m in entity.members if m.kind is MemberKind.ENUM_VALUE]
        if names:
            values = "Values: " + ", ".join(names)

    comment = None
    defined_in = context.source_of(entity)
    if defined_in is not None:
        comment = leading_comment(defined_in, entity.span.line)
    return HoverInfo(
        kind=entity.kind.value,
        signature=entity.signature,
        documentation=_join(comment, values, origin or f"Defined at line {entity.span.line}"),
    )


def member_hover(context: AnalysisContext, member: Member) -> HoverInfo:
    comment = None
    location = None
    owner = context.owner_of(member)
    if owner is not None and not member.synthetic:
        defined_in = context.source_of(owner)
        if defined_in is not None:
            comment = leading_comment(defined_in, member.line)
        location = f"Defined at line {member.line}"
    declared = f"Declared in {member.owner}" if member.owner else None
    return HoverInfo(
        kind=member.kind.value,
        signature=member.signature,
        documentation=_join(comment, declared, location),
    )


def function_hover(context: AnalysisContext, function: Member, origin: str | None = None) -> HoverInfo:
    comment = None
    if origin is None:
        comment = leading_comment(context.source, function.line)
    return HoverInfo(
        kind="function",
        signature=function.signature,
        documentation=_join(comment, origin or f"Defined at line {function.line}"),
    )


def hover(
    document: Document,
    offset: int,
    *,
    cache: SessionCache,
    resolver: ImportResolver,
) -> HoverInfo | None:
    """Describe the identifier at ``offset``, or None if nothing is known about it."""
    source = load_source(document, cache)
    if source is None:
        return None
    found = word_at(document.text, offset)
    if found is None:
        return None
    word, start, _ = found
    context = AnalysisContext(source, resolver)

    parts = receiver_before(document.text, start)
    if parts is not None:
        receiver = context.resolve_receiver(parts, start)
        if receiver is None:
            return None
        member = context.find_member(receiver, word)
        return member_hover(context, member) if member is not None else None

    entity = source.entity_index.get(word)
    if entity is not None:
        return entity_hover(context, entity)

    function = source.functions.get(word)
    if function is not None:
        return function_hover(context, function)

    info = context.imported.get(word)
    if info is not None:
        origin = f"Imported from {info.declaration.module}"
        if isinstance(info.symbol, SymbolEntity):
            return entity_hover(context, info.symbol, origin)
        if isinstance(info.symbol, Member):
            return function_hover(context, info.symbol, origin)
        return HoverInfo(kind="import", signature=word, documentation=origin)

    if word in source.bindings:
        line, _ = position_at(document.text, start)
        declarations = [d for d in source.declarations if d.name == word]
        before = [d for d in declarations if d.line <= line] or declarations
        return HoverInfo(
            kind="variable",
            signature=f"{word}: {source.bindings[word].display()}",
            documentation=f"Defined at line {before[-1].line}" if before else None,
        )

    member = context.enclosing_member(word, start)
    if member is not None:
        return member_hover(context, member)
    return None
