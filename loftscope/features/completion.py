"""Completion candidates for a cursor position."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loftscope.core.models import EntityKind, Member, MemberKind, SymbolEntity
from loftscope.features.builtins import COMPLETION_KEYWORDS, COMPLETION_TYPES, SNIPPETS
from loftscope.features.context import AnalysisContext, load_source, receiver_before
from loftscope.features.models import CompletionItem, CompletionKind, Document

if TYPE_CHECKING:
    from loftscope.core.cache import SessionCache
    from loftscope.core.resolver import ImportResolver

ENTITY_COMPLETION_KINDS = {
    EntityKind.CLASS: CompletionKind.CLASS,
    EntityKind.ENUM: CompletionKind.ENUM,
    EntityKind.RECORD: CompletionKind.STRUCT,
    EntityKind.INTERFACE: CompletionKind.INTERFACE,
}

MEMBER_COMPLETION_KINDS = {
    MemberKind.FIELD: CompletionKind.FIELD,
    MemberKind.METHOD: CompletionKind.METHOD,
    MemberKind.CONSTRUCTOR: CompletionKind.CONSTRUCTOR,
    MemberKind.ENUM_VALUE: CompletionKind.ENUM_MEMBER,
}


def call_snippet(member: Member) -> str:
    """``name(${1:a}, ${2:b})`` for a callable member."""
    params = ", ".join(f"${{{i}:{p.name}}}" for i, p in enumerate(member.parameters, start=1))
    return f"{member.name}({params})"


def member_item(member: Member) -> CompletionItem:
    return CompletionItem(
        name=member.name,
        kind=MEMBER_COMPLETION_KINDS[member.kind],
        detail=member.signature,
        insert_text=call_snippet(member) if member.is_callable else None,
        documentation=f"Declared in {member.owner}" if member.owner else None,
    )


def entity_item(entity: SymbolEntity, documentation: str | None = None) -> CompletionItem:
    return CompletionItem(
        name=entity.name,
        kind=ENTITY_COMPLETION_KINDS[entity.kind],
        detail=entity.signature,
        documentation=documentation,
    )


def _word_start(text: str, offset: int) -> int:
    start = offset
    while start > 0 and (text[start - 1].isalnum() or text[start - 1] == "_"):
        start -= 1
    return start


def complete(
    document: Document,
    offset: int,
    *,
    cache: SessionCache,
    resolver: ImportResolver,
) -> list[CompletionItem]:
    """Completion items at ``offset`` in ``document``.

    After ``receiver.`` only the receiver's members are offered. Anywhere
    else the result mixes keywords, types, entities, imports, functions,
    variables and snippets.
    """
    source = load_source(document, cache)
    if source is None:
        return []
    context = AnalysisContext(source, resolver)

    start = _word_start(document.text, offset)
    parts = receiver_before(document.text, start)
    if parts is not None:
        return member_completions(context, parts, start)
    return global_completions(context)


def member_completions(context: AnalysisContext, parts: list[str], offset: int) -> list[CompletionItem]:
    receiver = context.resolve_receiver(parts, offset)
    if receiver is None:
        return []
    items = []
    seen: set[str] = set()
    for member in context.receiver_members(receiver):
        if member.name in seen:
            continue
        seen.add(member.name)
        items.append(member_item(member))
    return items


def global_completions(context: AnalysisContext) -> list[CompletionItem]:
    items: list[CompletionItem] = []
    seen: set[tuple[str, CompletionKind]] = set()

    def add(item: CompletionItem) -> None:
        key = (item.name, item.kind)
        if key not in seen:
            seen.add(key)
            items.append(item)

    for keyword in COMPLETION_KEYWORDS:
        add(CompletionItem(keyword, CompletionKind.KEYWORD))
    for type_name in COMPLETION_TYPES:
        add(CompletionItem(type_name, CompletionKind.TYPE, detail="builtin type"))

    source = context.source
    for entity in source.entities:
        add(entity_item(entity))

    for name, info in context.imported.items():
        origin = f"Imported from {info.declaration.module}"
        if isinstance(info.symbol, SymbolEntity):
            add(entity_item(info.symbol, documentation=origin))
        elif isinstance(info.symbol, Member):
            add(
                CompletionItem(
                    name,
                    CompletionKind.FUNCTION,
                    detail=info.symbol.signature,
                    insert_text=call_snippet(info.symbol),
                    documentation=origin,
                )
            )
        else:
            kind = CompletionKind.CLASS if name[:1].isupper() else CompletionKind.VARIABLE
            add(CompletionItem(name, kind, documentation=origin))

    for function in source.functions.values():
        add(
            CompletionItem(
                function.name,
                CompletionKind.FUNCTION,
                detail=function.signature,
                insert_text=call_snippet(function),
            )
        )

    for name, type_ref in source.bindings.items():
        add(CompletionItem(name, CompletionKind.VARIABLE, detail=f"{name}: {type_ref.display()}"))

    for name, (detail, body) in SNIPPETS.items():
        add(CompletionItem(name, CompletionKind.SNIPPET, detail=detail, insert_text=body))
    return items
