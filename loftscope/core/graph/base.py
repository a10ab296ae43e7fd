"""Core HierarchyGraph class."""

from __future__ import annotations

from collections.abc import Iterable

from loftscope.core.graph import traversal
from loftscope.core.models import Member, SymbolEntity


def build_parent_map(entities: Iterable[SymbolEntity]) -> dict[str, str]:
    """Map each entity name to its declared parent."""
    parents: dict[str, str] = {}
    for entity in entities:
        if entity.parent and entity.name not in parents:
            parents[entity.name] = entity.parent
    return parents


class HierarchyGraph:
    """Inheritance relations between entities.

    The first entity registered under a name wins, which matches how one
    file resolves duplicate declarations.
    """

    __slots__ = ("_parents", "_interfaces", "_entities")

    def __init__(self) -> None:
        self._parents: dict[str, str] = {}
        self._interfaces: dict[str, tuple[str, ...]] = {}
        self._entities: dict[str, SymbolEntity] = {}

    @classmethod
    def build(cls, entities: Iterable[SymbolEntity]) -> HierarchyGraph:
        graph = cls()
        for entity in entities:
            graph.add_entity(entity)
        return graph

    def add_entity(self, entity: SymbolEntity) -> None:
        """Add an entity node. Ignored if the name is taken."""
        if entity.name in self._entities:
            return
        self._entities[entity.name] = entity
        if entity.parent:
            self._parents[entity.name] = entity.parent
        if entity.interfaces:
            self._interfaces[entity.name] = entity.interfaces

    def get_entity(self, name: str) -> SymbolEntity | None:
        return self._entities.get(name)

    def parent_of(self, name: str) -> str | None:
        return self._parents.get(name)

    def ancestors(self, name: str) -> list[str]:
        return traversal.ancestors(name, self._parents)

    def is_subclass(self, a: str, b: str) -> bool:
        return traversal.is_subclass(a, b, self._parents)

    def is_assignable(self, source: str, target: str) -> bool:
        return traversal.is_assignable(source, target, self._parents, self._interfaces)

    def inherited_members(self, name: str) -> list[Member]:
        return traversal.inherited_members(name, self._parents, self._entities)

    @property
    def parents(self) -> dict[str, str]:
        return self._parents

    @property
    def entities(self) -> dict[str, SymbolEntity]:
        return self._entities

    @property
    def num_entities(self) -> int:
        return len(self._entities)

    def __contains__(self, name: object) -> bool:
        return name in self._entities

    def __repr__(self) -> str:
        return f"HierarchyGraph(entities={self.num_entities}, parents={len(self._parents)})"
