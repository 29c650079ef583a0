"""Flags selecting which declarations a scope query reports."""

from enum import IntFlag


class ScopeFlags(IntFlag):
    """Kinds of declarations to report, plus the visibility filter switch."""
    NONE = 0
    METHODS = 1
    VARIABLES = 2
    TYPES = 4
    CHECK_VISIBILITY = 16

    @property
    def methods(self) -> bool:
        return ScopeFlags.METHODS in self

    @property
    def variables(self) -> bool:
        return ScopeFlags.VARIABLES in self

    @property
    def types(self) -> bool:
        return ScopeFlags.TYPES in self

    @property
    def check_visibility(self) -> bool:
        return ScopeFlags.CHECK_VISIBILITY in self


ALL_DECLARATIONS = ScopeFlags.METHODS | ScopeFlags.VARIABLES | ScopeFlags.TYPES
