from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from pestle.pratt_parser import Assoc, Op, PrattParser, PrattParserMap


@dataclass
class Pair:
    rule: str
    text: str
    inner: list["Pair"] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.rule}({self.text!r})"


OPERATORS = {"+": "plus", "-": "minus", "*": "times", "/": "divide", "%": "modulus", "^": "power"}


def _parse_expression(text: str, index: int) -> tuple[Pair, int]:
    start = index
    inner = []
    item, index = _parse_primary(text, index)
    inner.append(item)
    while index < len(text) and text[index] in OPERATORS:
        inner.append(Pair(OPERATORS[text[index]], text[index]))
        item, index = _parse_primary(text, index + 1)
        inner.append(item)
    return Pair("expression", text[start:index], inner), index


def _parse_primary(text: str, index: int) -> tuple[Pair, int]:
    if text[index] == "(":
        expr, index = _parse_expression(text, index + 1)
        assert text[index] == ")"
        return expr, index + 1
    start = index
    if text[index] == "-":
        index += 1
    while index < len(text) and text[index].isdigit():
        index += 1
    return Pair("number", text[start:index]), index


def parse_calculator(text: str) -> Pair:
    expr, index = _parse_expression(text, 0)
    assert index == len(text)
    return expr


def _div(lhs: int, rhs: int) -> int:
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs < 0) == (rhs < 0) else -quotient


def _rem(lhs: int, rhs: int) -> int:
    return lhs - rhs * _div(lhs, rhs)


def _infix(lhs: int, op: Pair, rhs: int) -> int:
    return {
        "plus": lambda: lhs + rhs,
        "minus": lambda: lhs - rhs,
        "times": lambda: lhs * rhs,
        "divide": lambda: _div(lhs, rhs),
        "modulus": lambda: _rem(lhs, rhs),
        "power": lambda: lhs**rhs,
    }[op.rule]()


def consume(pair: Pair, pratt: PrattParser) -> int:
    if pair.rule == "expression":
        return (
            pratt.map_primary(lambda p: consume(p, pratt))
            .map_infix(_infix)
            .parse(pair.inner)
        )
    return int(pair.text)


def calculator_pratt() -> PrattParser:
    return (
        PrattParser()
        .op(Op.infix("plus", Assoc.LEFT) | Op.infix("minus", Assoc.LEFT))
        .op(
            Op.infix("times", Assoc.LEFT)
            | Op.infix("divide", Assoc.LEFT)
            | Op.infix("modulus", Assoc.LEFT)
        )
        .op(Op.infix("power", Assoc.RIGHT))
    )


def test_pratt_parse_calculator():
    pair = parse_calculator("-12+3*(4-9)^3^2/9%7381")
    assert consume(pair, calculator_pratt()) == -1525


def test_single_number():
    assert consume(parse_calculator("-12"), calculator_pratt()) == -12


def test_nested_parens():
    assert consume(parse_calculator("((-12))"), calculator_pratt()) == -12


def _tree_pratt() -> PrattParser:
    return (
        PrattParser()
        .op(Op.infix("+", Assoc.LEFT) | Op.infix("-", Assoc.LEFT))
        .op(Op.infix("*", Assoc.LEFT) | Op.infix("/", Assoc.LEFT))
        .op(Op.infix("^", Assoc.RIGHT))
        .op(Op.postfix("!"))
        .op(Op.prefix("neg"))
    )


def _tree_map(pratt: PrattParser) -> PrattParserMap:
    return (
        pratt.map_primary(lambda p: p.text)
        .map_prefix(lambda op, rhs: f"(-{rhs})")
        .map_postfix(lambda lhs, op: f"({lhs}!)")
        .map_infix(lambda lhs, op, rhs: f"({lhs}{op.rule}{rhs})")
    )


def _tokens(*items: str) -> list[Pair]:
    ops = {"+", "-", "*", "/", "^", "!", "neg"}
    return [Pair(item, item) if item in ops else Pair("int", item) for item in items]


def test_precedence_orders_operators():
    result = _tree_map(_tree_pratt()).parse(_tokens("1", "+", "2", "*", "3"))
    assert result == "(1+(2*3))"


def test_left_associativity():
    result = _tree_map(_tree_pratt()).parse(_tokens("1", "-", "2", "-", "3"))
    assert result == "((1-2)-3)"


def test_equal_precedence_via_chaining():
    result = _tree_map(_tree_pratt()).parse(_tokens("1", "*", "2", "/", "3"))
    assert result == "((1*2)/3)"


def test_right_associativity():
    result = _tree_map(_tree_pratt()).parse(_tokens("2", "^", "3", "^", "2"))
    assert result == "(2^(3^2))"


def test_prefix_binds_tighter_than_postfix():
    result = _tree_map(_tree_pratt()).parse(_tokens("neg", "3", "!"))
    assert result == "((-3)!)"


def test_postfix_then_infix():
    result = _tree_map(_tree_pratt()).parse(_tokens("2", "!", "+", "neg", "1"))
    assert result == "((2!)+(-1))"


def test_accepts_any_iterator():
    result = _tree_map(_tree_pratt()).parse(iter(_tokens("1", "+", "2")))
    assert result == "(1+2)"


def test_as_rule_method_is_supported():
    class MethodPair:
        def __init__(self, rule: str, text: str) -> None:
            self._rule = rule
            self.text = text

        def as_rule(self) -> str:
            return self._rule

    pratt = PrattParser().op(Op.infix("+", Assoc.LEFT))
    result = (
        pratt.map_primary(lambda p: int(p.text))
        .map_infix(lambda lhs, op, rhs: lhs + rhs)
        .parse([MethodPair("int", "4"), MethodPair("+", "+"), MethodPair("int", "5")])
    )
    assert result == 9


def test_empty_pairs_raise():
    with pytest.raises(ValueError, match="non-empty"):
        _tree_map(_tree_pratt()).parse([])


def test_missing_primary_after_infix_raises():
    with pytest.raises(ValueError, match="non-empty"):
        _tree_map(_tree_pratt()).parse(_tokens("1", "+"))


def test_two_primaries_in_a_row_raise():
    with pytest.raises(ValueError, match="Expected operator"):
        _tree_map(_tree_pratt()).parse(_tokens("1", "2"))


def test_infix_at_start_raises():
    with pytest.raises(ValueError, match="Expected prefix or primary"):
        _tree_map(_tree_pratt()).parse(_tokens("+", "1"))


def test_prefix_after_primary_raises():
    with pytest.raises(ValueError, match="Expected postfix or infix"):
        _tree_map(_tree_pratt()).parse(_tokens("1", "neg"))


def test_missing_map_infix_raises():
    pratt = _tree_pratt()
    with pytest.raises(ValueError, match="map_infix"):
        pratt.map_primary(lambda p: p.text).parse(_tokens("1", "+", "2"))


def test_missing_map_prefix_raises():
    pratt = _tree_pratt()
    with pytest.raises(ValueError, match="map_prefix"):
        pratt.map_primary(lambda p: p.text).parse(_tokens("neg", "2"))


def test_missing_map_postfix_raises():
    pratt = _tree_pratt()
    with pytest.raises(ValueError, match="map_postfix"):
        pratt.map_primary(lambda p: p.text).parse(_tokens("2", "!"))


def test_op_chain_iterates_in_order():
    chained = Op.infix("a", Assoc.LEFT) | Op.prefix("b") | Op.postfix("c")
    assert [op.rule for op in chained] == ["a", "b", "c"]
    assert [op.assoc for op in chained] == [Assoc.LEFT, None, None]


def test_op_chain_does_not_modify_operands():
    first = Op.infix("a", Assoc.LEFT)
    second = Op.infix("b", Assoc.RIGHT)
    _ = first | second
    assert [op.rule for op in first] == ["a"]
    assert [op.rule for op in second] == ["b"]


def test_infix_requires_assoc():
    with pytest.raises(ValueError):
        Op("x", Op.infix("y", Assoc.LEFT).affix, None)


def test_later_registration_overrides_rule():
    pratt = (
        PrattParser()
        .op(Op.infix("*", Assoc.LEFT))
        .op(Op.infix("+", Assoc.LEFT))
    )
    result = (
        pratt.map_primary(lambda p: p.text)
        .map_infix(lambda lhs, op, rhs: f"({lhs}{op.rule}{rhs})")
        .parse(_tokens("1", "*", "2", "+", "3"))
    )
    assert result == "(1*(2+3))"