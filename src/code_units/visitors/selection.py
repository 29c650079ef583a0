"""Visitors that relate syntax nodes to a selected source range."""

from typing import List, Optional, Tuple

import tree_sitter

from ..locations.location import Location
from .base import TreeVisitor


class SelectionVisitor(TreeVisitor):
    """
    Finds the most specific named node enclosing a selection.

    For a non-empty selection this is the smallest node covering it; among
    nodes of equal extent the deepest one wins. For an empty selection
    (a caret) the innermost node holding the offset as an interior point
    is preferred, falling back to the innermost node starting or ending
    there.
    """

    def __init__(self, unit, selection: Location):
        super().__init__()
        self.unit = unit
        self.start = selection.start.offset
        self.end = selection.end.offset
        self._covering: Optional[Tuple[tree_sitter.Node, int]] = None
        self._boundary: Optional[Tuple[tree_sitter.Node, int]] = None

    def visit(self, node: tree_sitter.Node) -> bool:
        if not node.is_named:
            return False

        start, end = self.unit.char_range(node)
        if not (start <= self.start and self.end <= end):
            return False

        if not self.unit.is_synthetic(node):
            length = end - start
            if self.start == self.end and not (start < self.start < end):
                self._boundary = _innermost(self._boundary, node, length)
            else:
                self._covering = _innermost(self._covering, node, length)

        return True

    @property
    def selected_node(self) -> Optional[tree_sitter.Node]:
        if self._covering is not None:
            return self._covering[0]
        if self._boundary is not None:
            return self._boundary[0]
        return None


def _innermost(current, node, length):
    # Preorder: an equally long node seen later is a descendant.
    if current is None or length <= current[1]:
        return node, length
    return current


class CoveredNodesVisitor(TreeVisitor):
    """Collects the outermost named nodes lying entirely within a selection."""

    def __init__(self, unit, selection: Location):
        super().__init__()
        self.unit = unit
        self.start = selection.start.offset
        self.end = selection.end.offset
        self.selected_nodes: List[tree_sitter.Node] = []

    def visit(self, node: tree_sitter.Node) -> bool:
        if not node.is_named:
            return False

        start, end = self.unit.char_range(node)
        if end < self.start or start > self.end:
            return False

        if self.start <= start and end <= self.end and not self.unit.is_synthetic(node):
            self.selected_nodes.append(node)
            return False

        return True

    @property
    def first_selected_node(self) -> Optional[tree_sitter.Node]:
        return self.selected_nodes[0] if self.selected_nodes else None
