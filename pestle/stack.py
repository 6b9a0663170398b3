"""A stack that records its operations so it can be rewound to snapshots."""

from __future__ import annotations

import enum
from typing import Any, Generic, Iterator, Optional, TypeVar

T = TypeVar("T")


class _Op(enum.Enum):
    PUSH = enum.auto()
    POP = enum.auto()


class Stack(Generic[T]):
    """A stack whose changes since a snapshot can be undone."""

    def __init__(self) -> None:
        self._ops: list[tuple[_Op, T]] = []
        self._cache: list[T] = []
        self._snapshots: list[int] = []

    def is_empty(self) -> bool:
        """Whether the stack holds no elements."""
        return not self._cache

    def peek(self) -> Optional[T]:
        """The top element, or ``None`` when empty."""
        return self._cache[-1] if self._cache else None

    def push(self, elem: T) -> None:
        """Push ``elem`` onto the stack."""
        self._ops.append((_Op.PUSH, elem))
        self._cache.append(elem)

    def pop(self) -> Optional[T]:
        """Remove and return the top element, or ``None`` when empty."""
        if not self._cache:
            return None
        value = self._cache.pop()
        self._ops.append((_Op.POP, value))
        return value

    def __len__(self) -> int:
        return len(self._cache)

    def snapshot(self) -> None:
        """Remember the current state."""
        self._snapshots.append(len(self._ops))

    def clear_snapshot(self) -> None:
        """Forget the most recent snapshot, keeping the changes made since."""
        if self._snapshots:
            self._snapshots.pop()

    def restore(self) -> None:
        """Rewind to the most recent snapshot, or to empty if there is none."""
        if not self._snapshots:
            self._cache.clear()
            self._ops.clear()
            return
        index = self._snapshots.pop()
        for op, elem in reversed(self._ops[index:]):
            if op is _Op.PUSH:
                self._cache.pop()
            else:
                self._cache.append(elem)
        del self._ops[index:]

    def __iter__(self) -> Iterator[T]:
        return iter(self._cache)

    def __getitem__(self, index: Any) -> Any:
        return self._cache[index]

    def __repr__(self) -> str:
        return f"Stack({self._cache!r})"