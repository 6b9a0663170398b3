"""Cursor positions inside an input string, measured in UTF-8 byte offsets."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable, Optional
import re

if TYPE_CHECKING:
    from pestle.span import Span

_LINE_BREAK = re.compile(r"\r\n|\n")


def _is_continuation(byte: int) -> bool:
    return byte & 0xC0 == 0x80


def _utf8_width(lead: int) -> int:
    if lead < 0x80:
        return 1
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    return 2


class Position:
    """A cursor in a string that offers primitive matching operations.

    The position is a byte offset into the UTF-8 encoding of the input and
    always lies on a character boundary.
    """

    __slots__ = ("_input", "_data", "_pos")

    def __init__(self, input: str, pos: int) -> None:
        data = input.encode("utf-8")
        if not 0 <= pos <= len(data):
            raise ValueError(f"position {pos} is out of bounds")
        if pos < len(data) and _is_continuation(data[pos]):
            raise ValueError(f"position {pos} is not on a character boundary")
        self._input = input
        self._data = data
        self._pos = pos

    @classmethod
    def from_start(cls, input: str) -> "Position":
        """Create a position at the start of ``input``."""
        return cls(input, 0)

    def _at(self, pos: int) -> "Position":
        moved = object.__new__(Position)
        moved._input = self._input
        moved._data = self._data
        moved._pos = pos
        return moved

    @property
    def pos(self) -> int:
        """The byte offset of this position."""
        return self._pos

    @property
    def input(self) -> str:
        """The string this position points into."""
        return self._input

    def copy(self) -> "Position":
        """Return an independent position at the same place."""
        return self._at(self._pos)

    def span(self, other: "Position") -> "Span":
        """Create a span from this position to ``other``."""
        if self._input is not other._input:
            raise ValueError("span created from positions from different inputs")
        from pestle.span import Span

        return Span(self._input, self._pos, other._pos)

    def line_col(self) -> tuple[int, int]:
        """Return the one-based line and column of this position."""
        prefix = self._data[: self._pos].decode("utf-8")
        lines = _LINE_BREAK.split(prefix)
        return len(lines), len(lines[-1]) + 1

    def line_of(self) -> str:
        """Return the whole line, with its line break, containing this position."""
        return self._data[self.find_line_start() : self.find_line_end()].decode("utf-8")

    def find_line_start(self) -> int:
        """Return the byte offset where the current line starts."""
        return self._data.rfind(b"\n", 0, self._pos) + 1

    def find_line_end(self) -> int:
        """Return the byte offset just past the current line's line break."""
        data = self._data
        if not data:
            return 0
        if self._pos == len(data) - 1:
            return len(data)
        found = data.find(b"\n", self._pos)
        return len(data) if found < 0 else found + 1

    def at_start(self) -> bool:
        """Whether this position is at the start of the input."""
        return self._pos == 0

    def at_end(self) -> bool:
        """Whether this position is at the end of the input."""
        return self._pos == len(self._data)

    def skip(self, n: int) -> bool:
        """Move forward ``n`` characters; leave the position alone if impossible."""
        data = self._data
        pos = self._pos
        for _ in range(n):
            if pos >= len(data):
                return False
            pos += _utf8_width(data[pos])
        self._pos = pos
        return True

    def skip_back(self, n: int) -> bool:
        """Move back ``n`` characters; leave the position alone if impossible."""
        data = self._data
        pos = self._pos
        for _ in range(n):
            if pos == 0:
                return False
            pos -= 1
            while _is_continuation(data[pos]):
                pos -= 1
        self._pos = pos
        return True

    def skip_until(self, strings: Iterable[str]) -> bool:
        """Move to the first occurrence of any of ``strings``.

        If none is found the position moves to the end of the input and
        ``False`` is returned.
        """
        data = self._data
        start = self._pos
        hits = []
        for string in strings:
            needle = string.encode("utf-8")
            if not needle:
                if start < len(data):
                    hits.append(start)
                continue
            found = data.find(needle, start)
            if found >= 0:
                hits.append(found)
        if hits:
            self._pos = min(hits)
            return True
        self._pos = len(data)
        return False

    def _char(self) -> Optional[str]:
        data = self._data
        if self._pos >= len(data):
            return None
        width = _utf8_width(data[self._pos])
        return data[self._pos : self._pos + width].decode("utf-8")

    def match_char(self, c: str) -> bool:
        """Whether the character at this position is ``c``; never moves."""
        return self._char() == c

    def match_char_by(self, predicate: Callable[[str], bool]) -> bool:
        """Consume one character if ``predicate`` accepts it."""
        c = self._char()
        if c is not None and predicate(c):
            self._pos += len(c.encode("utf-8"))
            return True
        return False

    def match_string(self, string: str) -> bool:
        """Consume ``string`` if the input continues with it."""
        needle = string.encode("utf-8")
        if self._data.startswith(needle, self._pos):
            self._pos += len(needle)
            return True
        return False

    def peek_string(self, string: str) -> Optional["Position"]:
        """Return the position after ``string`` if it follows, without moving."""
        needle = string.encode("utf-8")
        if self._data.startswith(needle, self._pos):
            return self._at(self._pos + len(needle))
        return None

    def match_insensitive(self, string: str) -> bool:
        """Consume ``string`` compared ignoring ASCII case."""
        needle = string.encode("utf-8")
        end = self._pos + len(needle)
        if end > len(self._data):
            return False
        if self._data[self._pos : end].lower() == needle.lower():
            self._pos = end
            return True
        return False

    def match_range(self, start: str, end: str) -> bool:
        """Consume one character lying between ``start`` and ``end`` inclusive."""
        c = self._char()
        if c is not None and start <= c <= end:
            self._pos += len(c.encode("utf-8"))
            return True
        return False

    def _check_same_input(self, other: "Position") -> None:
        if self._input is not other._input:
            raise ValueError("cannot compare positions from different strs")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self._input is other._input and self._pos == other._pos

    def __lt__(self, other: "Position") -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        self._check_same_input(other)
        return self._pos < other._pos

    def __le__(self, other: "Position") -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        self._check_same_input(other)
        return self._pos <= other._pos

    def __gt__(self, other: "Position") -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        self._check_same_input(other)
        return self._pos > other._pos

    def __ge__(self, other: "Position") -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        self._check_same_input(other)
        return self._pos >= other._pos

    def __hash__(self) -> int:
        return hash((id(self._input), self._pos))

    def __repr__(self) -> str:
        return f"Position(pos={self._pos})"