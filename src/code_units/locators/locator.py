"""Unit locator: answers unit queries against a bound context."""

import logging
from typing import TYPE_CHECKING, List, Optional

from .unit_location import UnitLocation
from .units import ProgramUnit

if TYPE_CHECKING:
    from ..context import Context

logger = logging.getLogger(__name__)


class ProgramUnitLocator:
    """
    Locates program units in one context.

    The locator remembers its last query so that it can describe itself.
    """

    def __init__(self, context: 'Context'):
        self.context = context
        self._last_unit: Optional[ProgramUnit] = None

    def locate(self, unit: ProgramUnit) -> List[UnitLocation]:
        """
        Find every location of a program unit.

        Args:
            unit: The query, e.g. ClassUnit("Foo") or SelectedUnit(location)

        Returns:
            Matching locations in document order; empty if nothing matches
        """
        self._last_unit = unit
        return unit.locations(self.context)

    def __repr__(self) -> str:
        if self._last_unit is None:
            return f"ProgramUnitLocator({self.context.source.name})"
        return (f"Search for {self._last_unit.identifier} {self._last_unit!r} "
                f"in {self.context.source.name}")
