"""Spans over an input string, measured in UTF-8 byte offsets."""

from __future__ import annotations

from typing import Iterator, Optional

from pestle.position import Position


def _is_boundary(data: bytes, index: int) -> bool:
    return index == len(data) or (0 <= index < len(data) and data[index] & 0xC0 != 0x80)


def _valid_range(data: bytes, start: int, end: int) -> bool:
    return (
        0 <= start <= end <= len(data)
        and _is_boundary(data, start)
        and _is_boundary(data, end)
    )


class Span:
    """A slice of an input string between two character boundaries."""

    __slots__ = ("_input", "_data", "_start", "_end")

    def __init__(self, input: str, start: int, end: int) -> None:
        data = input.encode("utf-8")
        if not _valid_range(data, start, end):
            raise ValueError(f"invalid span {start}..{end} for input of {len(data)} bytes")
        self._input = input
        self._data = data
        self._start = start
        self._end = end

    def _sub(self, start: int, end: int) -> "Span":
        span = object.__new__(Span)
        span._input = self._input
        span._data = self._data
        span._start = start
        span._end = end
        return span

    @property
    def input(self) -> str:
        """The string this span covers part of."""
        return self._input

    def get(self, start: Optional[int] = None, end: Optional[int] = None) -> Optional["Span"]:
        """Return the sub-span ``[start, end)`` relative to this span, or ``None``.

        A missing ``start`` means the beginning of the span, a missing ``end``
        its end.
        """
        length = self._end - self._start
        rel_start = 0 if start is None else start
        rel_end = length if end is None else end
        if not 0 <= rel_start <= rel_end <= length:
            return None
        abs_start = self._start + rel_start
        abs_end = self._start + rel_end
        if not _valid_range(self._data, abs_start, abs_end):
            return None
        return self._sub(abs_start, abs_end)

    @property
    def start(self) -> int:
        """The start byte offset."""
        return self._start

    @property
    def end(self) -> int:
        """The end byte offset."""
        return self._end

    def start_pos(self) -> Position:
        """The position at the start of the span."""
        return Position(self._input, self._start)

    def end_pos(self) -> Position:
        """The position at the end of the span."""
        return Position(self._input, self._end)

    def split(self) -> tuple[Position, Position]:
        """Return the start and end positions of the span."""
        return self.start_pos(), self.end_pos()

    def as_str(self) -> str:
        """The text covered by the span."""
        return self._data[self._start : self._end].decode("utf-8")

    def lines(self) -> Iterator[str]:
        """Yield the text of every line at least partly covered by the span."""
        for span in self.lines_span():
            yield span.as_str()

    def lines_span(self) -> Iterator["Span"]:
        """Yield a span for every line at least partly covered by the span."""
        pos = self._start
        while pos <= self._end:
            try:
                cursor = Position(self._input, pos)
            except ValueError:
                return
            if cursor.at_end():
                return
            line_start = cursor.find_line_start()
            pos = cursor.find_line_end()
            if not _valid_range(self._data, line_start, pos):
                return
            yield self._sub(line_start, pos)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Span):
            return NotImplemented
        return (
            self._input is other._input
            and self._start == other._start
            and self._end == other._end
        )

    def __hash__(self) -> int:
        return hash((id(self._input), self._start, self._end))

    def __repr__(self) -> str:
        return f"Span(str={self.as_str()!r}, start={self._start}, end={self._end})"