"""Go-to-definition."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loftscope.core.models import Member, SymbolEntity
from loftscope.features.context import AnalysisContext, load_source, position_at, receiver_before, word_at
from loftscope.features.models import Document, Location

if TYPE_CHECKING:
    from loftscope.core.cache import SessionCache
    from loftscope.core.resolver import ImportResolver


def entity_location(context: AnalysisContext, entity: SymbolEntity) -> Location:
    return Location(entity.file or context.source.path, entity.span.line, entity.span.column)


def member_location(context: AnalysisContext, member: Member) -> Location | None:
    owner = context.owner_of(member)
    if owner is None:
        return None
    # Synthesized members have no text of their own.
    if member.synthetic or member.line < 1:
        return entity_location(context, owner)
    return Location(owner.file or context.source.path, member.line, member.column)


def find_definition(
    document: Document,
    offset: int,
    *,
    cache: SessionCache,
    resolver: ImportResolver,
) -> Location | None:
    """Where the identifier at ``offset`` is declared, or None."""
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
        if receiver is None or receiver.entity is None:
            return None
        member = context.find_member(receiver, word)
        return member_location(context, member) if member is not None else None

    entity = source.entity_index.get(word)
    if entity is not None:
        return entity_location(context, entity)

    function = source.functions.get(word)
    if function is not None:
        return Location(source.path, function.line, function.column)

    cursor = position_at(document.text, start)
    declarations = [d for d in source.declarations if d.name == word and (d.line, d.column) <= cursor]
    if declarations:
        last = declarations[-1]
        return Location(source.path, last.line, last.column)

    info = context.imported.get(word)
    if info is not None:
        if isinstance(info.symbol, SymbolEntity):
            return entity_location(context, info.symbol)
        if isinstance(info.symbol, Member):
            return Location(info.target.path, info.symbol.line, info.symbol.column)
        return Location(info.target.path, 1, 1)

    member = context.enclosing_member(word, start)
    if member is not None:
        return member_location(context, member)
    return None
