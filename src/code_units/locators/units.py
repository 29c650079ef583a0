"""
Program units: the queries understood by a unit locator.

Named units (classes, methods, fields, parameters, local variables) match
declarations by kind and simple name. A SelectedUnit matches the most
specific node enclosing a source range.
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, FrozenSet, List, Optional

from ..constants import (
    FIELD_DECLARATIONS, LOCAL_VARIABLE_DECLARATIONS, METHOD_DECLARATIONS,
    PARAMETER_DECLARATIONS, TYPE_DECLARATIONS
)
from ..locations.location import Location, covers
from ..visitors.declarations import DeclarationVisitor
from ..visitors.selection import SelectionVisitor
from .unit_location import UnitLocation

if TYPE_CHECKING:
    from ..context import Context

logger = logging.getLogger(__name__)

ALL = "all"


class ProgramUnit(ABC):
    """Base class for unit queries."""

    @property
    @abstractmethod
    def identifier(self) -> str:
        """Key describing what the query looks for."""

    @abstractmethod
    def locations(self, context: 'Context') -> List[UnitLocation]:
        """
        Find every match of this unit in a bound context.

        Returns:
            Matches in document order; empty when nothing matches
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.identifier})"


class NamedUnit(ProgramUnit):
    """
    A declaration looked up by kind and simple name.

    Args:
        name: Simple name to match; None matches every declaration of the kind
        scope: Only report declarations lying within this location
    """
    node_types: ClassVar[FrozenSet[str]] = frozenset()

    def __init__(self, name: Optional[str] = None, scope: Optional[Location] = None):
        if name is not None and not name.strip():
            raise ValueError("Invalid identifier")
        self.name = name
        self.scope = scope

    @property
    def identifier(self) -> str:
        return self.name if self.name is not None else ALL

    def locations(self, context: 'Context') -> List[UnitLocation]:
        unit = context.unit
        visitor = DeclarationVisitor(unit, self.node_types, self.name)
        context.accept(visitor)

        results = []
        for node in visitor.declarations:
            location = context.locate_unit_node(node)
            if self.scope is not None and not covers(self.scope, location):
                continue
            results.append(location)

        logger.debug(f"{self!r} matched {len(results)} declaration(s) in {context.source.name}")
        return results


class ClassUnit(NamedUnit):
    """Classes, interfaces, enums, records and annotation types."""
    node_types = TYPE_DECLARATIONS


class MethodUnit(NamedUnit):
    """Methods and constructors."""
    node_types = METHOD_DECLARATIONS


class FieldUnit(NamedUnit):
    """Field declarations; a declaration matches if any of its declarators has the name."""
    node_types = FIELD_DECLARATIONS


class ParameterUnit(NamedUnit):
    """Formal, varargs and catch parameters; untyped lambda parameters are not reported."""
    node_types = PARAMETER_DECLARATIONS


class VarUnit(NamedUnit):
    """Local variable declarations."""
    node_types = LOCAL_VARIABLE_DECLARATIONS


class SelectedUnit(ProgramUnit):
    """The most specific node enclosing a selected location."""

    def __init__(self, location: Location):
        self.location = location

    @property
    def identifier(self) -> str:
        return f"[{self.location.start.offset}, {self.location.end.offset}]"

    def locations(self, context: 'Context') -> List[UnitLocation]:
        visitor = SelectionVisitor(context.unit, self.location)
        context.accept(visitor)

        node = visitor.selected_node
        if node is None:
            return []
        return [context.locate_unit_node(node)]
