"""
Unit locators.

- units: ClassUnit, MethodUnit, FieldUnit, ParameterUnit, VarUnit, SelectedUnit
- unit_location: UnitLocation, a Location tagged with its node
- locator: ProgramUnitLocator
"""

from .locator import ProgramUnitLocator
from .unit_location import UnitLocation, describe_node
from .units import (
    ClassUnit,
    FieldUnit,
    MethodUnit,
    NamedUnit,
    ParameterUnit,
    ProgramUnit,
    SelectedUnit,
    VarUnit,
)

__all__ = [
    "ProgramUnit",
    "NamedUnit",
    "ClassUnit",
    "MethodUnit",
    "FieldUnit",
    "ParameterUnit",
    "VarUnit",
    "SelectedUnit",
    "UnitLocation",
    "describe_node",
    "ProgramUnitLocator",
]
