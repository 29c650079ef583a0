"""Parse modes: the grammar entry point used to read a source."""

from enum import Enum

from .constants import (
    STATEMENTS_PREFIX, STATEMENTS_SUFFIX, TYPE_BODY_PREFIX, TYPE_BODY_SUFFIX
)


class ParseMode(Enum):
    """
    Which grammar entry point a source was parsed with.

    The mode decides how the root node of a parsed unit is interpreted:
    a whole file, the body of a (missing) class, or a run of statements
    inside a (missing) method.
    """
    COMPILATION_UNIT = "compilation_unit"
    TYPE_BODY = "type_body"
    STATEMENTS = "statements"

    @property
    def is_fragment(self) -> bool:
        return self is not ParseMode.COMPILATION_UNIT

    @property
    def prefix(self) -> str:
        if self is ParseMode.TYPE_BODY:
            return TYPE_BODY_PREFIX
        if self is ParseMode.STATEMENTS:
            return STATEMENTS_PREFIX
        return ""

    @property
    def suffix(self) -> str:
        if self is ParseMode.TYPE_BODY:
            return TYPE_BODY_SUFFIX
        if self is ParseMode.STATEMENTS:
            return STATEMENTS_SUFFIX
        return ""

    @classmethod
    def from_name(cls, name: str) -> 'ParseMode':
        """Look up a mode by value or member name, case-insensitively."""
        normalized = name.strip().lower().replace('-', '_')
        for mode in cls:
            if normalized in (mode.value, mode.name.lower()):
                return mode
        raise ValueError(f"Unknown parse mode: {name}")
