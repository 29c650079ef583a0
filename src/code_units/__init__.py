"""
Code units: a query layer over parsed Java programs.

Sources are parsed with tree-sitter into a bound Context. A Context answers
where classes, methods, fields, parameters, local variables or a selected
range are (as Locations), and, through its bindings, which declarations
are available and visible at a position.

Typical use::

    context = JavaParser().parse_java(Source.from_content(text))
    methods = context.locate(MethodUnit("exit"))
    names = context.scope_analyser().used_field_names(context.locate_classes()[0])
"""

from .bindings import (
    ALL_DECLARATIONS,
    BindingKind,
    BindingRequestBySignature,
    BindingRequestByValue,
    ScopeAnalyser,
    ScopeFlags,
)
from .config import ParserConfiguration
from .context import Context, bind_context
from .errors import (
    AlreadyBoundError,
    BindingError,
    CodeUnitsError,
    ConfigurationError,
    InvalidRange,
    MalformedUnitError,
    ParseError,
    SyntaxErrors,
    UnboundContextError,
)
from .locations import (
    Location,
    Position,
    covers,
    create_location,
    create_position,
    intersects,
    outside,
)
from .locators import (
    ClassUnit,
    FieldUnit,
    MethodUnit,
    ParameterUnit,
    ProgramUnitLocator,
    SelectedUnit,
    UnitLocation,
    VarUnit,
)
from .modes import ParseMode
from .parser import JavaParser
from .source import Source
from .unit import ParsedUnit, SyntaxIssue

__version__ = "0.1.0"

__all__ = [
    "Source",
    "Position",
    "Location",
    "create_position",
    "create_location",
    "covers",
    "intersects",
    "outside",
    "ParseMode",
    "ParserConfiguration",
    "JavaParser",
    "ParsedUnit",
    "SyntaxIssue",
    "Context",
    "bind_context",
    "ClassUnit",
    "MethodUnit",
    "FieldUnit",
    "ParameterUnit",
    "VarUnit",
    "SelectedUnit",
    "UnitLocation",
    "ProgramUnitLocator",
    "BindingKind",
    "ScopeFlags",
    "ALL_DECLARATIONS",
    "BindingRequestBySignature",
    "BindingRequestByValue",
    "ScopeAnalyser",
    "CodeUnitsError",
    "InvalidRange",
    "AlreadyBoundError",
    "UnboundContextError",
    "ParseError",
    "MalformedUnitError",
    "ConfigurationError",
    "BindingError",
    "SyntaxErrors",
]
