"""
Source model.

A Source is an immutable named text buffer. It anchors Locations: every
offset a Location holds is a character offset into ``Source.content``.
"""

import re
from bisect import bisect_right
from dataclasses import dataclass
from functools import cached_property
from typing import List, Optional

from .constants import DEFAULT_NAME
from .locations.position import Position

CLASS_NAME_PATTERN = re.compile(r'\bclass\s+([A-Za-z_$][\w$]*)')


@dataclass(frozen=True)
class Source:
    """Immutable named source text. Equality is by name and content."""
    name: str
    content: str

    @classmethod
    def from_content(cls, content: str, name: str = DEFAULT_NAME) -> 'Source':
        """Create a Source from some content, optionally naming it."""
        return cls(name=name, content=content)

    @classmethod
    def from_seed(cls, seed: 'Source', new_code: str) -> 'Source':
        """
        Create a Source from new code, reusing a previous version's name.

        The seed's name is kept unless the new code declares a class whose
        name differs from it, in which case that class name is used.

        Args:
            seed: Previous version of the source
            new_code: The replacement content

        Returns:
            A new Source holding new_code
        """
        class_name = pull_class_name(new_code)
        name = seed.name if class_name is None else class_name
        return cls(name=name, content=new_code)

    @property
    def length(self) -> int:
        return len(self.content)

    def __len__(self) -> int:
        return len(self.content)

    def text_at(self, location) -> str:
        """Raw text covered by a location of this source."""
        return self.content[location.start.offset:location.end.offset]

    def position_at(self, offset: int) -> Position:
        """
        Build the Position for a character offset.

        Lines and columns are 0-based. ``\\n``, ``\\r\\n`` and ``\\r`` all
        count as a single line break.
        """
        line = bisect_right(self._line_starts, offset) - 1
        line = max(line, 0)
        return Position(line=line, column=offset - self._line_starts[line], offset=offset)

    def char_offset(self, byte_offset: int) -> int:
        """Convert a UTF-8 byte offset (as reported by the parser) into a character offset."""
        if self._is_ascii:
            return byte_offset
        return len(self._content_bytes[:byte_offset].decode('utf-8', errors='ignore'))

    def byte_offset(self, char_offset: int) -> int:
        """Convert a character offset into a UTF-8 byte offset."""
        if self._is_ascii:
            return char_offset
        return len(self.content[:char_offset].encode('utf-8'))

    @property
    def byte_length(self) -> int:
        return len(self._content_bytes)

    @cached_property
    def _content_bytes(self) -> bytes:
        return self.content.encode('utf-8')

    @cached_property
    def _is_ascii(self) -> bool:
        return len(self._content_bytes) == len(self.content)

    @cached_property
    def _line_starts(self) -> List[int]:
        starts = [0]
        previous = ''
        for index, char in enumerate(self.content):
            if char == '\n':
                if previous == '\r':
                    starts[-1] = index + 1
                else:
                    starts.append(index + 1)
            elif char == '\r':
                starts.append(index + 1)
            previous = char
        return starts

    def __repr__(self) -> str:
        return f"Source(name={self.name}, code=...)"


def pull_class_name(content: str) -> Optional[str]:
    """Return the name of the first class declared in content, if any."""
    match = CLASS_NAME_PATTERN.search(content)
    return match.group(1) if match else None
