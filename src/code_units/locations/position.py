"""Source coordinates."""

from dataclasses import dataclass
from functools import total_ordering

from ..errors import InvalidRange


@total_ordering
@dataclass(frozen=True, eq=False)
class Position:
    """
    A single point in source text.

    Equality, hashing and ordering use ``offset`` only; ``line`` and
    ``column`` (both 0-based) are display metadata.
    """
    line: int
    column: int
    offset: int

    def __post_init__(self):
        if self.offset < 0 or self.line < 0 or self.column < 0:
            raise InvalidRange(
                f"Negative position: line={self.line}, column={self.column}, offset={self.offset}"
            )

    def __eq__(self, other):
        if not isinstance(other, Position):
            return NotImplemented
        return self.offset == other.offset

    def __lt__(self, other):
        if not isinstance(other, Position):
            return NotImplemented
        return self.offset < other.offset

    def __hash__(self):
        return hash(self.offset)

    def __repr__(self) -> str:
        return f"Position(line={self.line}, column={self.column}, offset={self.offset})"
