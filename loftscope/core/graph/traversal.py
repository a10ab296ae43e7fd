"""Hierarchy traversal.

Every ascent takes an optional ``visited`` set. A name that is already in it
ends the walk, so a cycle such as ``A < B, B < A`` acts as the top of the
chain instead of looping. Pass one set through nested calls to share the
guard.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from loftscope.core.graph.models import TreeNode

if TYPE_CHECKING:
    from loftscope.core.graph.base import HierarchyGraph
    from loftscope.core.models import Member, SymbolEntity


def ancestors(name: str, parent_map: Mapping[str, str], visited: set[str] | None = None) -> list[str]:
    """Parent chain of ``name``, nearest first, excluding ``name`` itself."""
    if visited is None:
        visited = set()
    chain: list[str] = []
    visited.add(name)
    current = parent_map.get(name)
    while current is not None and current not in visited:
        visited.add(current)
        chain.append(current)
        current = parent_map.get(current)
    return chain


def is_subclass(a: str, b: str, parent_map: Mapping[str, str], visited: set[str] | None = None) -> bool:
    """True if ``a`` is ``b`` or inherits from it."""
    if visited is None:
        visited = set()
    current: str | None = a
    while current is not None:
        if current == b:
            return True
        if current in visited:
            return False
        visited.add(current)
        current = parent_map.get(current)
    return False


def inherited_members(
    name: str,
    parent_map: Mapping[str, str],
    entity_index: Mapping[str, SymbolEntity],
    visited: set[str] | None = None,
) -> list[Member]:
    """Members of ``name`` and its ancestors, one per name.

    The nearest definition of a name wins, so overrides hide what they
    override. The walk stops at an entity missing from ``entity_index``.
    """
    if visited is None:
        visited = set()
    seen: dict[str, Member] = {}
    current: str | None = name
    while current is not None and current not in visited:
        visited.add(current)
        entity = entity_index.get(current)
        if entity is None:
            break
        for member in entity.members:
            if member.name not in seen:
                seen[member.name] = member
        current = parent_map.get(current)
    return list(seen.values())


def is_assignable(
    source: str,
    target: str,
    parent_map: Mapping[str, str],
    interface_map: Mapping[str, tuple[str, ...]],
    visited: set[str] | None = None,
) -> bool:
    """True if a ``source`` value fits where ``target`` is expected.

    Walks parents and implemented interfaces.
    """
    if visited is None:
        visited = set()
    pending = [source]
    while pending:
        current = pending.pop()
        if current == target:
            return True
        if current in visited:
            continue
        visited.add(current)
        parent = parent_map.get(current)
        if parent is not None:
            pending.append(parent)
        pending.extend(interface_map.get(current, ()))
    return False


def get_subclass_tree(graph: HierarchyGraph, root: str, max_depth: int = 10) -> TreeNode | None:
    """Tree of every entity that inherits from ``root``.

    DFS with cycle detection.
    """
    if graph.get_entity(root) is None:
        return None

    children_of: dict[str, list[str]] = {}
    for child, parent in graph.parents.items():
        children_of.setdefault(parent, []).append(child)

    visited: set[str] = set()

    def dfs(name: str, depth: int) -> TreeNode | None:
        entity = graph.get_entity(name)
        if depth > max_depth or name in visited or entity is None:
            return None

        visited.add(name)
        node = TreeNode(entity=entity, depth=depth)
        for child in sorted(children_of.get(name, [])):
            subtree = dfs(child, depth + 1)
            if subtree:
                node.children.append(subtree)
        visited.remove(name)
        return node

    return dfs(root, 0)
