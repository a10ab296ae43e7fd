"""Data models for hierarchy queries."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from loftscope.core.models import SymbolEntity


@dataclass
class TreeNode:
    """A node in a subclass tree."""

    entity: SymbolEntity
    depth: int
    children: list[TreeNode] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.entity.name

    def __iter__(self) -> Iterator[TreeNode]:
        """Pre-order traversal."""
        yield self
        for child in self.children:
            yield from child

    def __len__(self) -> int:
        """Total nodes in subtree."""
        return 1 + sum(len(c) for c in self.children)
