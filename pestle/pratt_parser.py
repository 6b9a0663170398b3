"""Pratt parsing of prefix, postfix and infix operator expressions.

The pairs handed to :meth:`PrattParserMap.parse` must alternate in the order
``prefix* primary postfix* (infix prefix* primary postfix*)*``. A pair's rule
is read from its ``rule`` attribute, or from its ``as_rule()`` method.
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Generic, Iterable, Iterator, Optional, TypeVar

T = TypeVar("T")

PREC_STEP = 10


class Assoc(enum.Enum):
    """Associativity of an infix binary operator."""

    LEFT = "left"
    RIGHT = "right"


class _Affix(enum.Enum):
    PREFIX = "prefix"
    POSTFIX = "postfix"
    INFIX = "infix"


def _rule_of(pair: Any) -> Any:
    rule = getattr(pair, "rule", None)
    if rule is not None and not callable(rule):
        return rule
    as_rule = getattr(pair, "as_rule", None)
    if callable(as_rule):
        return as_rule()
    raise TypeError(f"cannot determine the rule of {pair!r}")


class Op:
    """An operator bound to a rule; ``|`` chains operators of equal precedence."""

    def __init__(self, rule: Any, affix: _Affix, assoc: Optional[Assoc] = None) -> None:
        if affix is _Affix.INFIX and assoc is None:
            raise ValueError("an infix operator needs an associativity")
        if affix is not _Affix.INFIX and assoc is not None:
            raise ValueError("only infix operators have an associativity")
        self.rule = rule
        self.affix = affix
        self.assoc = assoc
        self._rest: tuple[Op, ...] = ()

    @classmethod
    def prefix(cls, rule: Any) -> "Op":
        """Define ``rule`` as a prefix unary operator."""
        return cls(rule, _Affix.PREFIX)

    @classmethod
    def postfix(cls, rule: Any) -> "Op":
        """Define ``rule`` as a postfix unary operator."""
        return cls(rule, _Affix.POSTFIX)

    @classmethod
    def infix(cls, rule: Any, assoc: Assoc) -> "Op":
        """Define ``rule`` as an infix binary operator with associativity ``assoc``."""
        return cls(rule, _Affix.INFIX, assoc)

    def _single(self) -> "Op":
        return Op(self.rule, self.affix, self.assoc)

    def __or__(self, other: "Op") -> "Op":
        if not isinstance(other, Op):
            return NotImplemented
        chained = self._single()
        chained._rest = self._rest + tuple(other)
        return chained

    def __iter__(self) -> Iterator["Op"]:
        yield self._single()
        yield from self._rest

    def __repr__(self) -> str:
        parts = []
        for op in self:
            suffix = f", {op.assoc.name}" if op.assoc is not None else ""
            parts.append(f"Op.{op.affix.value}({op.rule!r}{suffix})")
        return " | ".join(parts)


class PrattParser:
    """Operators with precedences, in the order they were added (lowest first)."""

    def __init__(self) -> None:
        self._prec = PREC_STEP
        self._ops: dict[Any, tuple[_Affix, Optional[Assoc], int]] = {}

    def op(self, op: Op) -> "PrattParser":
        """Add ``op`` (and the operators chained to it) one precedence level higher."""
        self._prec += PREC_STEP
        for single in op:
            self._ops[single.rule] = (single.affix, single.assoc, self._prec)
        return self

    def map_primary(self, primary: Callable[[Any], T]) -> "PrattParserMap[T]":
        """Start a mapping that turns primary pairs into values with ``primary``."""
        return PrattParserMap(self, primary)


class _Peekable:
    _EMPTY = object()

    def __init__(self, items: Iterable[Any]) -> None:
        self._iter = iter(items)
        self._head: Any = self._EMPTY

    def peek(self) -> Any:
        if self._head is self._EMPTY:
            self._head = next(self._iter, self._EMPTY)
        return None if self._head is self._EMPTY else self._head

    def has_next(self) -> bool:
        self.peek()
        return self._head is not self._EMPTY

    def next(self) -> Any:
        if not self.has_next():
            raise ValueError("Pratt parsing expects non-empty Pairs")
        head, self._head = self._head, self._EMPTY
        return head


class PrattParserMap(Generic[T]):
    """How primaries and operators of an expression are mapped to values."""

    def __init__(self, pratt: PrattParser, primary: Callable[[Any], T]) -> None:
        self._pratt = pratt
        self._primary = primary
        self._prefix: Optional[Callable[[Any, T], T]] = None
        self._postfix: Optional[Callable[[T, Any], T]] = None
        self._infix: Optional[Callable[[T, Any, T], T]] = None

    def map_prefix(self, prefix: Callable[[Any, T], T]) -> "PrattParserMap[T]":
        """Map prefix operators with ``prefix(op, rhs)``."""
        self._prefix = prefix
        return self

    def map_postfix(self, postfix: Callable[[T, Any], T]) -> "PrattParserMap[T]":
        """Map postfix operators with ``postfix(lhs, op)``."""
        self._postfix = postfix
        return self

    def map_infix(self, infix: Callable[[T, Any, T], T]) -> "PrattParserMap[T]":
        """Map infix operators with ``infix(lhs, op, rhs)``."""
        self._infix = infix
        return self

    def parse(self, pairs: Iterable[Any]) -> T:
        """Reduce ``pairs`` to a single value."""
        return self._expr(_Peekable(pairs), 0)

    def _expr(self, pairs: _Peekable, rbp: int) -> T:
        lhs = self._nud(pairs)
        while rbp < self._lbp(pairs):
            lhs = self._led(pairs, lhs)
        return lhs

    def _nud(self, pairs: _Peekable) -> T:
        pair = pairs.next()
        entry = self._pratt._ops.get(_rule_of(pair))
        if entry is None:
            return self._primary(pair)
        affix, _, prec = entry
        if affix is not _Affix.PREFIX:
            raise ValueError(f"Expected prefix or primary expression, found {pair}")
        rhs = self._expr(pairs, prec - 1)
        if self._prefix is None:
            raise ValueError(f"Could not map {pair}, no `.map_prefix(...)` specified")
        return self._prefix(pair, rhs)

    def _led(self, pairs: _Peekable, lhs: T) -> T:
        pair = pairs.next()
        entry = self._pratt._ops.get(_rule_of(pair))
        if entry is not None:
            affix, assoc, prec = entry
            if affix is _Affix.INFIX:
                rhs = self._expr(pairs, prec if assoc is Assoc.LEFT else prec - 1)
                if self._infix is None:
                    raise ValueError(f"Could not map {pair}, no `.map_infix(...)` specified")
                return self._infix(lhs, pair, rhs)
            if affix is _Affix.POSTFIX:
                if self._postfix is None:
                    raise ValueError(
                        f"Could not map {pair}, no `.map_postfix(...)` specified"
                    )
                return self._postfix(lhs, pair)
        raise ValueError(f"Expected postfix or infix expression, found {pair}")

    def _lbp(self, pairs: _Peekable) -> int:
        if not pairs.has_next():
            return 0
        pair = pairs.peek()
        entry = self._pratt._ops.get(_rule_of(pair))
        if entry is None:
            raise ValueError(f"Expected operator, found {pair}")
        return entry[2]