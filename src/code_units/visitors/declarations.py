"""Visitor collecting declaration nodes."""

from typing import FrozenSet, List, Optional

import tree_sitter

from ..utils.nodes import declared_names
from .base import TreeVisitor


class DeclarationVisitor(TreeVisitor):
    """
    Collects declarations of the given node types, in document order.

    Args:
        unit: The parsed unit being walked; its synthetic nodes are skipped
        node_types: Declaration node types to collect
        name: Only collect declarations introducing this simple name
    """

    def __init__(self, unit, node_types: FrozenSet[str], name: Optional[str] = None):
        super().__init__()
        self.unit = unit
        self.node_types = node_types
        self.name = name
        self.declarations: List[tree_sitter.Node] = []

    def visit(self, node: tree_sitter.Node) -> bool:
        if not node.is_named:
            return False

        if node.type in self.node_types and not self.unit.is_synthetic(node):
            if self.name is None or self.name in declared_names(node):
                self.declarations.append(node)

        return True
