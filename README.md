# pestle

pestle provides building blocks for hand-written parsers. It also evaluates the operator expressions those parsers produce.

All offsets are byte offsets into the UTF-8 encoding of the input string.

## Modules

- `pestle.position.Position` is a cursor into a string.
  - Matching: `match_string`, `match_insensitive` (ASCII case only), `match_range`, `match_char`, `match_char_by`, `peek_string`.
  - Movement: `skip`, `skip_back`, `skip_until`.
  - Inspection: `at_start`, `at_end`.
  - Reporting: `line_col` and `line_of`.
  - Each matching method returns a bool. It moves the cursor only on success.
- `pestle.span.Span` is a slice of the input between two character boundaries.
  - `as_str`, `start`, `end`, `start_pos`, `end_pos` and `split`.
  - `get(start, end)` returns a sub-span relative to the span, or `None`.
  - `lines()` and `lines_span()` give every line the span touches.
- `pestle.stack.Stack` is a stack that can take snapshots.
  - `snapshot()` takes a snapshot.
  - `restore()` rewinds to the last snapshot, or empties the stack when there is none.
  - `clear_snapshot()` drops the last snapshot.
- `pestle.token.Token` marks the start or end of a matched rule.
  - Create one with `Token.start(rule, pos)` or `Token.end(rule, pos)`.
  - `TokenKind` tells the two apart.
- `pestle.pratt_parser` does Pratt parsing of prefix, postfix and infix operators. It provides `Assoc`, `Op`, `PrattParser` and `PrattParserMap`.
- `pestle.prec_climber` does precedence climbing over infix operators. It provides `Assoc`, `Operator` and `PrecClimber`.

The package raises `ValueError` when:
- a position or span is out of bounds or not on a character boundary;
- positions from different input strings are compared, or a span is made from them;
- an expression's pairs are not in the expected order;
- no mapping function was given for an operator that appears.

## Installation

```
pip install pestle
```

## Positions and spans

```python
from pestle.position import Position

pos = Position("a\rb\nc\r\nd嗨", 4)
assert pos.line_col() == (2, 1)
assert pos.line_of() == "c\r\n"

start = Position.from_start("hello world")
end = start.copy()
assert end.match_string("hello")
span = start.span(end)
assert span.as_str() == "hello"
assert span.get(1, 3).as_str() == "el"
```

## Rewindable stack

```python
from pestle.stack import Stack

stack = Stack()
stack.push(0)
stack.snapshot()
stack.push(1)
stack.restore()
assert list(stack) == [0]
```

## Evaluating operator expressions

Both evaluators work on a sequence of "pairs". A pair can be any object with a `rule` attribute or an `as_rule()` method.

```python
from dataclasses import dataclass


@dataclass
class Pair:
    rule: str
    text: str


pairs = [Pair("num", "1"), Pair("plus", "+"), Pair("num", "2"),
         Pair("times", "*"), Pair("num", "3")]


def infix(lhs, op, rhs):
    return {"plus": lhs + rhs, "times": lhs * rhs, "power": lhs ** rhs}[op.rule]
```

### Pratt parsing

Operators passed in one `op(...)` call share a precedence, and they are chained with `|`. Each later call binds tighter than the ones before it.

```python
from pestle.pratt_parser import Assoc, Op, PrattParser

pratt = (
    PrattParser()
    .op(Op.infix("plus", Assoc.LEFT))
    .op(Op.infix("times", Assoc.LEFT))
    .op(Op.infix("power", Assoc.RIGHT))
)
value = pratt.map_primary(lambda p: int(p.text)).map_infix(infix).parse(pairs)
assert value == 7
```

`map_prefix(op, rhs)` handles operators declared with `Op.prefix`. `map_postfix(lhs, op)` handles those declared with `Op.postfix`.

### Precedence climbing

Each entry gets precedence *index + 1*. Operators chained with `|` share that precedence.

```python
from pestle.prec_climber import Assoc, Operator, PrecClimber

climber = PrecClimber([
    Operator("plus", Assoc.LEFT),
    Operator("times", Assoc.LEFT),
    Operator("power", Assoc.RIGHT),
])
assert climber.climb(pairs, lambda p: int(p.text), infix) == 7
```

`PrecClimber.from_table` takes `(rule, precedence, assoc)` entries directly.

## What it does not do

pestle has no grammar language and no parser that turns input into tokens or pairs. You write the matching on top of `Position`, or you produce the pairs yourself. The Pratt parser and the precedence climber only evaluate pairs that already exist.

## Running the tests

```
pip install -e ".[test]"
pytest
```