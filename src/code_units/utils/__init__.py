"""
Utility modules for the code units query layer.

- nodes: read-only helpers over tree-sitter syntax nodes
"""

from .nodes import (
    declared_name,
    declared_names,
    declarators_of,
    error_nodes,
    find_ancestor,
    find_child_by_type,
    find_children_by_type,
    is_error_node,
    is_same_node,
    modifier_keywords,
    name_node_of,
    node_key,
    node_text,
    walk_nodes,
)

__all__ = [
    "node_key",
    "node_text",
    "walk_nodes",
    "find_child_by_type",
    "find_children_by_type",
    "find_ancestor",
    "is_same_node",
    "name_node_of",
    "declared_name",
    "declared_names",
    "declarators_of",
    "modifier_keywords",
    "is_error_node",
    "error_nodes",
]
