"""Locations tagged with the syntax node they were found for."""

from dataclasses import dataclass, field
from typing import Any

from ..constants import (
    FIELD_DECLARATIONS, LOCAL_VARIABLE_DECLARATIONS, METHOD_DECLARATIONS,
    PARAMETER_DECLARATIONS, TYPE_DECLARATIONS
)
from ..locations.location import Location
from ..utils.nodes import declared_names, node_text


@dataclass(frozen=True, eq=False)
class UnitLocation(Location):
    """A program-unit location: a Location plus the node it stands for."""
    node: Any = field(default=None, repr=False)

    @property
    def unit_node(self) -> Any:
        return self.node

    @property
    def node_type(self) -> str:
        return self.node.type if self.node is not None else ''

    def __str__(self) -> str:
        return describe_node(self.node)

    def __repr__(self) -> str:
        return f"UnitLocation({describe_node(self.node)}, start={self.start}, end={self.end})"


def describe_node(node) -> str:
    """Short label for a node, e.g. ``Type(Foo)`` or ``Method(exit)``."""
    if node is None:
        return "Unit()"

    node_type = node.type
    if node_type in TYPE_DECLARATIONS:
        label = "Type"
    elif node_type in METHOD_DECLARATIONS:
        label = "Method"
    elif node_type in FIELD_DECLARATIONS:
        label = "Field"
    elif node_type in PARAMETER_DECLARATIONS:
        label = "Parameter"
    elif node_type in LOCAL_VARIABLE_DECLARATIONS:
        label = "Var"
    else:
        text = node_text(node).strip().splitlines()
        return f"Node({node_type}: {text[0][:30] if text else ''})"

    return f"{label}({', '.join(declared_names(node))})"
