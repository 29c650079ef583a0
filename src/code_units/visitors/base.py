"""
Tree visitation.

Queries never walk a tree themselves; they hand a TreeVisitor to
``accept`` (usually through ``Context.accept``), which calls back once per
node in document order.
"""

import tree_sitter


class TreeVisitor:
    """
    Base class for visitors driven by ``accept``.

    ``visit`` returns False to skip a node's children. Setting ``done``
    stops the walk: no further node is visited.
    """

    def __init__(self):
        self.done = False

    def visit(self, node: tree_sitter.Node) -> bool:
        return True

    def end_visit(self, node: tree_sitter.Node) -> None:
        pass


def accept(node: tree_sitter.Node, visitor: TreeVisitor) -> None:
    """Drive ``visitor`` over ``node`` and its descendants, preorder."""
    if visitor.done:
        return

    if visitor.visit(node) and not visitor.done:
        for child in node.children:
            accept(child, visitor)
            if visitor.done:
                break

    visitor.end_visit(node)
