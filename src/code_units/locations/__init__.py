"""
Source coordinates and ranges.

This package contains the range algebra used by every query:
- position: Position, a single point in a source
- location: Location and the relations between two locations
"""

from .location import (
    Location,
    LocationRelation,
    covers,
    create_location,
    create_position,
    create_source_location,
    ends_inside,
    inside,
    inside_scope,
    intersects,
    is_after,
    is_before,
    locate_word,
    outside,
    relation,
)
from .position import Position

__all__ = [
    "Position",
    "Location",
    "LocationRelation",
    "create_position",
    "create_location",
    "create_source_location",
    "locate_word",
    "covers",
    "intersects",
    "outside",
    "inside",
    "inside_scope",
    "ends_inside",
    "is_before",
    "is_after",
    "relation",
]
