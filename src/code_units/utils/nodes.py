"""
Helpers over tree-sitter syntax nodes.

These functions only read nodes; they never keep references to a tree
beyond the call.
"""

from typing import Iterable, Iterator, List, Optional, Tuple

import tree_sitter

from ..constants import ERROR_NODE

NodeKey = Tuple[int, int, str]


def node_key(node: tree_sitter.Node) -> NodeKey:
    """Stable identity of a node within one tree."""
    return (node.start_byte, node.end_byte, node.type)


def node_text(node: Optional[tree_sitter.Node]) -> str:
    if node is None or node.text is None:
        return ''
    return node.text.decode('utf-8', errors='replace')


def walk_nodes(node: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
    """Yield a node and all of its descendants in document (preorder) order."""
    yield node
    for child in node.children:
        yield from walk_nodes(child)


def find_child_by_type(node: tree_sitter.Node, node_type: str) -> Optional[tree_sitter.Node]:
    for child in node.children:
        if child.type == node_type:
            return child
    return None


def find_children_by_type(node: tree_sitter.Node, node_types: Iterable[str]) -> List[tree_sitter.Node]:
    types = set(node_types)
    return [child for child in node.children if child.type in types]


def find_ancestor(node: tree_sitter.Node, node_types: Iterable[str]) -> Optional[tree_sitter.Node]:
    """Nearest proper ancestor whose type is one of ``node_types``."""
    types = set(node_types)
    current = node.parent
    while current is not None:
        if current.type in types:
            return current
        current = current.parent
    return None


def is_same_node(a: Optional[tree_sitter.Node], b: Optional[tree_sitter.Node]) -> bool:
    if a is None or b is None:
        return a is b
    return node_key(a) == node_key(b)


def name_node_of(node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
    """
    The identifier naming a declaration node.

    Spread parameters keep their name on an inner declarator; type
    parameters carry an unlabelled type identifier.
    """
    name = node.child_by_field_name('name')
    if name is not None:
        return name

    if node.type == 'spread_parameter':
        declarator = find_child_by_type(node, 'variable_declarator')
        if declarator is not None:
            return declarator.child_by_field_name('name')
    elif node.type == 'type_parameter':
        return find_child_by_type(node, 'type_identifier') or find_child_by_type(node, 'identifier')

    return None


def declared_name(node: tree_sitter.Node) -> Optional[str]:
    name = name_node_of(node)
    return node_text(name) if name is not None else None


def declarators_of(node: tree_sitter.Node) -> List[tree_sitter.Node]:
    """Variable declarators of a field, constant or local variable declaration."""
    return node.children_by_field_name('declarator')


def declared_names(node: tree_sitter.Node) -> List[str]:
    """Every simple name a declaration node introduces."""
    declarators = declarators_of(node)
    if declarators:
        return [declared_name(each) for each in declarators if declared_name(each)]

    name = declared_name(node)
    return [name] if name else []


def modifier_keywords(node: tree_sitter.Node) -> List[str]:
    """Keyword modifiers (``public``, ``static``, ...) of a declaration; annotations excluded."""
    modifiers = find_child_by_type(node, 'modifiers')
    if modifiers is None:
        return []
    return [child.type for child in modifiers.children if not child.is_named]


def is_error_node(node: tree_sitter.Node) -> bool:
    return node.type == ERROR_NODE or node.is_missing


def error_nodes(node: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
    """Yield ERROR and MISSING nodes below ``node``, outermost ERROR nodes only."""
    if not node.has_error:
        return
    for child in node.children:
        if is_error_node(child):
            yield child
        elif child.has_error:
            yield from error_nodes(child)
