"""
Source ranges and their geometric relations.

All relations are defined on character offsets only; line and column
numbers never take part in a comparison. Ranges are closed: a Location
``[start, end]`` shares an offset with another Location when the two
intervals overlap or touch.

Conventions:
    - Ordering is by ``start.offset``; ties break narrower-first, so a
      Location sorts before a wider Location that begins at the same
      offset.
    - ``covers(a, b)`` implies ``intersects(a, b)``.
    - ``outside`` is the exact complement of ``intersects``: two ranges
      touching at a single offset are not outside each other.
    - ``relation(a, b)`` partitions every pair into exactly one of SAME,
      COVERS, COVERED_BY, OVERLAPS or OUTSIDE.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import TYPE_CHECKING, List

from ..errors import InvalidRange
from .position import Position

if TYPE_CHECKING:
    from ..source import Source

logger = logging.getLogger(__name__)


@total_ordering
@dataclass(frozen=True, eq=False)
class Location:
    """An immutable range ``[start, end]`` over a Source."""
    source: 'Source'
    start: Position
    end: Position

    def __post_init__(self):
        if self.start.offset < 0:
            raise InvalidRange(f"Negative start offset: {self.start.offset}")
        if self.end.offset < self.start.offset:
            raise InvalidRange(
                f"End offset {self.end.offset} precedes start offset {self.start.offset}"
            )
        if self.source is not None and self.end.offset > len(self.source.content):
            raise InvalidRange(
                f"End offset {self.end.offset} exceeds content length {len(self.source.content)}"
            )

    def begins(self, position: Position) -> bool:
        """True if this location starts at or before the given position."""
        return self.start.offset <= position.offset

    def ends(self, position: Position) -> bool:
        """True if this location ends at or before the given position."""
        return self.end.offset <= position.offset

    def same(self, other: 'Location') -> bool:
        return self.start == other.start and self.end == other.end

    @property
    def length(self) -> int:
        return self.end.offset - self.start.offset

    @property
    def is_empty(self) -> bool:
        """Zero-length locations mark an insertion point or an empty selection."""
        return self.start.offset == self.end.offset

    @property
    def text(self) -> str:
        return self.source.content[self.start.offset:self.end.offset]

    def _sort_key(self):
        return (self.start.offset, self.end.offset)

    def __eq__(self, other):
        if not isinstance(other, Location):
            return NotImplemented
        return self.source == other.source and self.same(other)

    def __lt__(self, other):
        if not isinstance(other, Location):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self):
        return hash(self._sort_key())

    def __repr__(self) -> str:
        return f"Location(start={self.start}, end={self.end})"


class LocationRelation(Enum):
    """How two locations relate; exactly one holds for any pair."""
    SAME = "same"
    COVERS = "covers"
    COVERED_BY = "covered_by"
    OVERLAPS = "overlaps"
    OUTSIDE = "outside"


def create_position(line: int, column: int, offset: int) -> Position:
    return Position(line=line, column=column, offset=offset)


def create_location(source: 'Source', start_offset: int, end_offset: int) -> Location:
    """
    Create a location for a character offset range of a source.

    Args:
        source: The source the offsets point into
        start_offset: Starting character offset
        end_offset: Ending character offset

    Returns:
        A Location whose positions carry line and column information

    Raises:
        InvalidRange: if the offsets are negative, reversed, or beyond the content
    """
    if start_offset < 0 or end_offset < start_offset:
        raise InvalidRange(f"Invalid offsets: [{start_offset}, {end_offset}]")
    if end_offset > len(source.content):
        raise InvalidRange(
            f"Offset {end_offset} is outside {source.name} (length {len(source.content)})"
        )

    return Location(
        source=source,
        start=source.position_at(start_offset),
        end=source.position_at(end_offset),
    )


def create_source_location(source: 'Source') -> Location:
    """A location spanning a whole source."""
    return create_location(source, 0, len(source.content))


def locate_word(source: 'Source', word: str) -> List[Location]:
    """
    Find every whole-word occurrence of ``word`` in a source.

    Returns:
        Locations in document order; empty if the word never occurs
    """
    pattern = re.compile(r'(?<![\w$])' + re.escape(word) + r'(?![\w$])')
    return [
        create_location(source, match.start(), match.end())
        for match in pattern.finditer(source.content)
    ]


def covers(base: Location, other: Location) -> bool:
    """True if ``base`` contains ``other`` (boundaries included)."""
    return (base.start.offset <= other.start.offset
            and other.end.offset <= base.end.offset)


def intersects(base: Location, other: Location) -> bool:
    """True if the two closed ranges share at least one offset."""
    return (base.start.offset <= other.end.offset
            and other.start.offset <= base.end.offset)


def outside(base: Location, other: Location) -> bool:
    """True if the two ranges share no offset."""
    return not intersects(base, other)


def inside(other: Location, base: Location) -> bool:
    """
    True if ``other`` lies strictly within ``base``, or both are the same range.
    """
    if base.same(other):
        return True

    return (base.start.offset < other.start.offset
            and other.end.offset < base.end.offset)


def inside_scope(scope: Location, offset: int) -> bool:
    """True if an offset falls in the half-open range ``[start, end)`` of a scope."""
    return scope.start.offset <= offset < scope.end.offset


def is_before(base: Location, other: Location) -> bool:
    """True if ``other`` ends at or before the start of ``base``."""
    return other.end.offset <= base.start.offset


def is_after(base: Location, other: Location) -> bool:
    """True if ``other`` starts at or after the end of ``base``."""
    return base.end.offset <= other.start.offset


def ends_inside(base: Location, other: Location) -> bool:
    """True if ``base`` ends strictly inside ``other`` while starting before it ends."""
    return (other.start.offset < base.end.offset
            and base.end.offset < other.end.offset)


def relation(a: Location, b: Location) -> LocationRelation:
    """Classify the pair ``(a, b)``."""
    if a.same(b):
        return LocationRelation.SAME
    if covers(a, b):
        return LocationRelation.COVERS
    if covers(b, a):
        return LocationRelation.COVERED_BY
    if intersects(a, b):
        return LocationRelation.OVERLAPS
    return LocationRelation.OUTSIDE
