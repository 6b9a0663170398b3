"""Infix expression parsing with the precedence climbing method.

The pairs handed to :meth:`PrecClimber.climb` start with a primary pair and
then alternate between an operator pair and a primary pair. A pair's rule is
read from its ``rule`` attribute, or from its ``as_rule()`` method.
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Iterable, Iterator, Optional, TypeVar

T = TypeVar("T")


class Assoc(enum.Enum):
    """Associativity of an :class:`Operator`."""

    LEFT = "left"
    RIGHT = "right"


def _rule_of(pair: Any) -> Any:
    rule = getattr(pair, "rule", None)
    if rule is not None and not callable(rule):
        return rule
    as_rule = getattr(pair, "as_rule", None)
    if callable(as_rule):
        return as_rule()
    raise TypeError(f"cannot determine the rule of {pair!r}")


class Operator:
    """An infix operator bound to a rule; ``|`` chains operators of equal precedence."""

    def __init__(self, rule: Any, assoc: Assoc) -> None:
        self.rule = rule
        self.assoc = assoc
        self._rest: tuple[Operator, ...] = ()

    def _single(self) -> "Operator":
        return Operator(self.rule, self.assoc)

    def __or__(self, other: "Operator") -> "Operator":
        if not isinstance(other, Operator):
            return NotImplemented
        chained = self._single()
        chained._rest = self._rest + tuple(other)
        return chained

    def __iter__(self) -> Iterator["Operator"]:
        yield self._single()
        yield from self._rest

    def __repr__(self) -> str:
        return " | ".join(f"Operator({op.rule!r}, {op.assoc.name})" for op in self)


class _Peekable:
    _EMPTY = object()

    def __init__(self, items: Iterator[Any]) -> None:
        self._iter = items
        self._head: Any = self._EMPTY

    def has_next(self) -> bool:
        if self._head is self._EMPTY:
            self._head = next(self._iter, self._EMPTY)
        return self._head is not self._EMPTY

    def peek(self) -> Any:
        return self._head if self.has_next() else None

    def next(self) -> Optional[Any]:
        if not self.has_next():
            return None
        head, self._head = self._head, self._EMPTY
        return head


class PrecClimber:
    """Operators with precedences that reduce alternating pairs to one value."""

    def __init__(self, ops: Iterable[Operator]) -> None:
        """Each entry of ``ops`` gets precedence *index + 1*; chained operators share it."""
        self._ops: list[tuple[Any, int, Assoc]] = [
            (single.rule, prec, single.assoc)
            for prec, op in enumerate(ops, start=1)
            for single in op
        ]

    @classmethod
    def from_table(cls, ops: Iterable[tuple[Any, int, Assoc]]) -> "PrecClimber":
        """Create a climber from ``(rule, precedence, assoc)`` entries in any order."""
        climber = cls(())
        climber._ops = [(rule, int(prec), assoc) for rule, prec, assoc in ops]
        return climber

    @property
    def ops(self) -> tuple[tuple[Any, int, Assoc], ...]:
        """The ``(rule, precedence, assoc)`` entries of this climber."""
        return tuple(self._ops)

    def _get(self, rule: Any) -> Optional[tuple[int, Assoc]]:
        for candidate, prec, assoc in self._ops:
            if candidate == rule:
                return prec, assoc
        return None

    def climb(
        self,
        pairs: Iterable[Any],
        primary: Callable[[Any], T],
        infix: Callable[[T, Any, T], T],
    ) -> T:
        """Map primary pairs with ``primary`` and reduce them with ``infix``."""
        stream = _Peekable(iter(pairs))
        first = stream.next()
        if first is None:
            raise ValueError("precedence climbing requires a non-empty Pairs")
        return self._climb_rec(primary(first), 0, stream, primary, infix)

    def _climb_rec(
        self,
        lhs: T,
        min_prec: int,
        pairs: _Peekable,
        primary: Callable[[Any], T],
        infix: Callable[[T, Any, T], T],
    ) -> T:
        while pairs.has_next():
            entry = self._get(_rule_of(pairs.peek()))
            if entry is None or entry[0] < min_prec:
                break
            prec = entry[0]
            op = pairs.next()
            operand = pairs.next()
            if operand is None:
                raise ValueError("infix operator must be followed by a primary expression")
            rhs = primary(operand)

            while pairs.has_next():
                following = self._get(_rule_of(pairs.peek()))
                if following is None:
                    break
                new_prec, assoc = following
                if new_prec > prec or (assoc is Assoc.RIGHT and new_prec == prec):
                    rhs = self._climb_rec(rhs, new_prec, pairs, primary, infix)
                else:
                    break

            lhs = infix(lhs, op, rhs)
        return lhs

    def __repr__(self) -> str:
        return f"PrecClimber({self._ops!r})"