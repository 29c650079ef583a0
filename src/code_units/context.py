"""
Context: the bound result of parsing one Source under one parse mode.

A Context is created for a Source and bound exactly once to a ParsedUnit.
After binding it answers unit queries (classes, methods, fields, the unit
enclosing a selection) and hands out the scope analyser and binding
environment of the unit.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

import tree_sitter

from .errors import AlreadyBoundError, MalformedUnitError, SyntaxErrors, UnboundContextError
from .locations.location import Location, create_location
from .locators.locator import ProgramUnitLocator
from .locators.unit_location import UnitLocation
from .locators.units import ClassUnit, FieldUnit, MethodUnit, ProgramUnit, SelectedUnit
from .modes import ParseMode
from .source import Source
from .unit import ParsedUnit, SyntaxIssue
from .visitors.base import TreeVisitor, accept

if TYPE_CHECKING:
    from .bindings.analyser import ScopeAnalyser
    from .bindings.environment import BindingEnvironment

logger = logging.getLogger(__name__)


class Context:
    """Query API over one parsed Source."""

    def __init__(self, source: Source):
        self._source = source
        self._unit: Optional[ParsedUnit] = None
        self._scope: Optional[Location] = None
        self._syntax_problems: List[SyntaxIssue] = []
        self._bindings: Optional['BindingEnvironment'] = None

    @classmethod
    def create(cls, source: Source) -> 'Context':
        return cls(source)

    def bind(self, unit: ParsedUnit) -> 'Context':
        """
        Bind a parsed unit to this context.

        Computes the context scope (the range spanned by the unit root) and
        collects the unit's syntax problems.

        Raises:
            AlreadyBoundError: if this context, or the unit, is already bound
            MalformedUnitError: if the unit root does not fit its parse mode
        """
        if self._unit is not None:
            raise AlreadyBoundError(f"{self!r} is already bound to {self._unit!r}")
        if not unit.is_well_formed():
            raise MalformedUnitError(
                f"{self._source.name} is not a well-formed {unit.mode.value}", mode=unit.mode
            )

        scope = unit.locate(unit.node)
        syntax_problems = unit.syntax_issues()

        unit.attach(self)
        self._unit = unit
        self._scope = scope
        self._syntax_problems = syntax_problems

        logger.debug(f"Bound {unit!r} to context of {self._source.name}")
        if self._syntax_problems:
            logger.warning(
                f"{self._source.name} parsed as {unit.mode.value} "
                f"with {len(self._syntax_problems)} syntax issue(s)"
            )
        return self

    @property
    def source(self) -> Source:
        return self._source

    @property
    def source_content(self) -> str:
        return self._source.content

    @property
    def is_bound(self) -> bool:
        return self._unit is not None

    @property
    def unit(self) -> ParsedUnit:
        return self._require_unit()

    @property
    def root(self) -> tree_sitter.Node:
        return self._require_unit().node

    @property
    def mode(self) -> ParseMode:
        return self._require_unit().mode

    @property
    def scope(self) -> Location:
        self._require_unit()
        return self._scope

    @property
    def is_partial(self) -> bool:
        return self._require_unit().is_partial

    @property
    def syntax_problems(self) -> List[SyntaxIssue]:
        return list(self._syntax_problems)

    def is_malformed(self) -> bool:
        return bool(self._syntax_problems)

    def ensure_well_formed(self) -> 'Context':
        """
        Raises:
            SyntaxErrors: listing every syntax issue of the bound unit
        """
        if self.is_malformed():
            raise SyntaxErrors(f"{self._source.name} contains syntax errors", self._syntax_problems)
        return self

    def accept(self, visitor: TreeVisitor) -> None:
        """Drive a visitor over the unit root, in document order."""
        accept(self.root, visitor)

    def unit_locator(self) -> ProgramUnitLocator:
        return ProgramUnitLocator(self)

    def locate(self, program_unit: ProgramUnit) -> List[UnitLocation]:
        return self.unit_locator().locate(program_unit)

    def locate_classes(self) -> List[UnitLocation]:
        return self.locate(ClassUnit())

    def locate_methods(self) -> List[UnitLocation]:
        return self.locate(MethodUnit())

    def locate_fields(self) -> List[UnitLocation]:
        return self.locate(FieldUnit())

    def locate_unit(self, start_offset: int, end_offset: int) -> List[UnitLocation]:
        """
        Find the declaration or node most specifically enclosing a range.

        Raises:
            InvalidRange: if the offsets do not fit the source
        """
        return self.locate_unit_at(create_location(self._source, start_offset, end_offset))

    def locate_unit_at(self, location: Location) -> List[UnitLocation]:
        return self.locate(SelectedUnit(location))

    def locate_node(self, node: tree_sitter.Node) -> Location:
        return self._require_unit().locate(node)

    def locate_unit_node(self, node: tree_sitter.Node) -> UnitLocation:
        start, end = self._require_unit().char_range(node)
        return UnitLocation(
            source=self._source,
            start=self._source.position_at(start),
            end=self._source.position_at(end),
            node=node,
        )

    def node_at(self, location: Location) -> Optional[tree_sitter.Node]:
        """The most specific node enclosing a location, or None."""
        found = self.locate_unit_at(location)
        return found[0].node if found else None

    @property
    def bindings(self) -> 'BindingEnvironment':
        """Binding environment of the bound unit, built on first use."""
        if self._bindings is None:
            from .bindings.environment import BindingEnvironment
            self._bindings = BindingEnvironment(self)
        return self._bindings

    def scope_analyser(self) -> 'ScopeAnalyser':
        from .bindings.analyser import ScopeAnalyser
        return ScopeAnalyser(self)

    def _require_unit(self) -> ParsedUnit:
        if self._unit is None:
            raise UnboundContextError(f"Context for {self._source.name} has no parsed unit")
        return self._unit

    def __repr__(self) -> str:
        mode = self._unit.mode.value if self._unit is not None else None
        return f"Context(source={self._source.name}, mode={mode})"


def bind_context(context: Context, unit: ParsedUnit) -> Context:
    """Bind ``unit`` to ``context``; see ``Context.bind``."""
    return context.bind(unit)
