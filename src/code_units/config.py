"""
Parser configuration.

A configuration is shared by every parser created from it. Values can be
given explicitly or read from the environment:

    CODE_UNITS_PARSE_MODES                 comma separated matcher order,
                                           e.g. "compilation_unit,type_body"
    CODE_UNITS_SOURCE_LEVEL                Java source level (informational)
    CODE_UNITS_TOLERATE_STATEMENT_ERRORS   "true"/"false"
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Tuple

from .errors import ConfigurationError
from .modes import ParseMode

logger = logging.getLogger(__name__)

DEFAULT_PARSE_MODES = (
    ParseMode.COMPILATION_UNIT,
    ParseMode.TYPE_BODY,
    ParseMode.STATEMENTS,
)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ParserConfiguration:
    """Settings shared by Java parsers and their unit matchers."""
    parse_modes: Tuple[ParseMode, ...] = field(default=DEFAULT_PARSE_MODES)
    source_level: str = "8"
    tolerate_statement_errors: bool = True

    def __post_init__(self):
        if not self.parse_modes:
            raise ConfigurationError("At least one parse mode is required")
        if len(set(self.parse_modes)) != len(self.parse_modes):
            raise ConfigurationError(f"Duplicate parse modes: {self.parse_modes}")

    @classmethod
    def from_env(cls) -> 'ParserConfiguration':
        """
        Build a configuration from CODE_UNITS_* environment variables.

        Returns:
            ParserConfiguration with defaults for unset variables

        Raises:
            ConfigurationError: if a variable holds an invalid value
        """
        modes_value = os.getenv("CODE_UNITS_PARSE_MODES")
        parse_modes = DEFAULT_PARSE_MODES
        if modes_value:
            try:
                parse_modes = tuple(
                    ParseMode.from_name(each)
                    for each in modes_value.split(",") if each.strip()
                )
            except ValueError as e:
                raise ConfigurationError(str(e)) from e

        source_level = os.getenv("CODE_UNITS_SOURCE_LEVEL", "8")
        tolerate = _parse_bool(
            "CODE_UNITS_TOLERATE_STATEMENT_ERRORS",
            os.getenv("CODE_UNITS_TOLERATE_STATEMENT_ERRORS", "true"),
        )

        config = cls(
            parse_modes=parse_modes,
            source_level=source_level,
            tolerate_statement_errors=tolerate,
        )
        logger.debug(f"Loaded parser configuration from environment: {config}")
        return config


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: {value!r}")
