"""Tokens marking where matched rules start and end."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from pestle.position import Position


class TokenKind(enum.Enum):
    """Whether a token opens or closes a matched rule."""

    START = "start"
    END = "end"


@dataclass(frozen=True)
class Token:
    """The start or end position of a matched rule."""

    kind: TokenKind
    rule: Any
    pos: Position

    @classmethod
    def start(cls, rule: Any, pos: Position) -> "Token":
        """A token for the starting position of ``rule``."""
        return cls(TokenKind.START, rule, pos)

    @classmethod
    def end(cls, rule: Any, pos: Position) -> "Token":
        """A token for the ending position of ``rule``."""
        return cls(TokenKind.END, rule, pos)