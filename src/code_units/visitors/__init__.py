"""
Tree visitors.

- base: TreeVisitor and the ``accept`` walk driving it
- selection: nodes enclosing, or covered by, a selected range
- declarations: declaration nodes by kind and name
"""

from .base import TreeVisitor, accept
from .declarations import DeclarationVisitor
from .selection import CoveredNodesVisitor, SelectionVisitor

__all__ = [
    "TreeVisitor",
    "accept",
    "SelectionVisitor",
    "CoveredNodesVisitor",
    "DeclarationVisitor",
]
