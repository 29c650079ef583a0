"""
Exceptions raised by the code units query layer.

Empty results (no matching unit, no binding in scope) are never reported
through these exceptions; they are normal outcomes.
"""

from typing import List, Optional


class CodeUnitsError(Exception):
    """Base exception for code units errors."""

    pass


class InvalidRange(CodeUnitsError, ValueError):
    """Offsets are inconsistent or fall outside the source content."""

    pass


class AlreadyBoundError(CodeUnitsError):
    """A context (or parsed unit) was bound a second time."""

    pass


class UnboundContextError(CodeUnitsError):
    """A context was queried before a parsed unit was bound to it."""

    pass


class ParseError(CodeUnitsError):
    """The parser could not produce a tree for the given source."""

    pass


class MalformedUnitError(CodeUnitsError):
    """The parsed root node does not fit the requested parse mode."""

    def __init__(self, message: str, mode: Optional[object] = None):
        super().__init__(message)
        self.mode = mode


class ConfigurationError(CodeUnitsError):
    """Invalid parser configuration value."""

    pass


class BindingError(CodeUnitsError):
    """A binding was used in a way its kind does not support."""

    pass


class SyntaxErrors(CodeUnitsError):
    """
    Aggregates the syntax issues found in a parsed source.

    The message lists each issue, ordered by message text, followed by the
    total count.
    """

    def __init__(self, title: str, issues: List[object]):
        self.title = title
        self.issues = sorted(issues, key=lambda issue: issue.message)
        super().__init__(self._create_message())

    def _create_message(self) -> str:
        lines = [f"{self.title}:", ""]
        for index, issue in enumerate(self.issues, start=1):
            line = issue.location.start.line + 1
            lines.append(f"{index}) Error at line {line}:")
            lines.append(f" {issue.message}")
            lines.append("")
        lines.append(f"{len(self.issues)} error[s]")
        return "\n".join(lines)
