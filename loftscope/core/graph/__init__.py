"""
Inheritance graph and the queries built on it.

Data Structures:
    - HierarchyGraph: entity index plus parent and interface maps
    - TreeNode: subclass tree node for display

Algorithms:
    - traversal: ancestor walks, is_subclass, inherited_members, is_assignable,
      subclass trees; all guarded by a visited set
    - analysis: inheritance cycle detection
"""

from loftscope.core.graph.base import HierarchyGraph, build_parent_map
from loftscope.core.graph.models import TreeNode
from loftscope.core.graph.traversal import inherited_members, is_assignable, is_subclass

__all__ = [
    "HierarchyGraph",
    "TreeNode",
    "build_parent_map",
    "inherited_members",
    "is_assignable",
    "is_subclass",
]
