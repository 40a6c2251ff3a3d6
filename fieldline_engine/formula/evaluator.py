"""
Formula Evaluator Module
========================

Resolves template measures against concrete field dimensions.

A measure is either a plain number (meters) or a formula string such as
``"field_width / 2"`` or ``"(field_width - 40.3) / 2"``.

Grammar (recursive descent, no host-language eval):

    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/") unary)*
    unary      := ("+" | "-") unary | primary
    primary    := NUMBER | IDENTIFIER | "(" expression ")"

IDENTIFIER is restricted to ``field_width`` and ``field_length``.

Design:
- Tokenizer + parser + tree-walking evaluator, all pure
- Parsed trees are immutable and memoised per source text
- Fail fast: malformed input raises, never yields NaN/Infinity
"""

import math
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterator, List, Mapping, Optional, Union

from fieldline_engine.errors import DivisionByZeroError, InvalidFormulaError

FIELD_WIDTH = "field_width"
FIELD_LENGTH = "field_length"
VARIABLES = frozenset({FIELD_WIDTH, FIELD_LENGTH})

_TOKEN_PATTERN = re.compile(
    r"\s*(?:"
    r"(?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
    r"|(?P<name>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<op>[-+*/()])"
    r")"
)


@dataclass(frozen=True)
class Token:
    kind: str  # "number", "name", "op", "end"
    text: str
    position: int


def tokenize(source: str) -> List[Token]:
    """
    Split a formula into tokens.

    Raises:
        InvalidFormulaError: On characters outside the restricted grammar
    """
    tokens: List[Token] = []
    position = 0
    while position < len(source):
        if source[position:].strip() == "":
            break
        match = _TOKEN_PATTERN.match(source, position)
        if match is None or match.lastgroup is None:
            offset = position + (len(source[position:]) - len(source[position:].lstrip()))
            raise InvalidFormulaError(
                f"Unexpected character {source[offset]!r}", source, offset
            )
        kind = match.lastgroup
        tokens.append(Token(kind, match.group(kind), match.start(kind)))
        position = match.end()
    tokens.append(Token("end", "", len(source)))
    return tokens


# ── Expression tree ───────────────────────────────────────────────────────────

class Expression:
    """Base node of a parsed formula."""

    def evaluate(self, variables: Mapping[str, float], source: str) -> float:
        raise NotImplementedError

    def walk(self) -> Iterator["Expression"]:
        yield self


@dataclass(frozen=True)
class Number(Expression):
    value: float

    def evaluate(self, variables: Mapping[str, float], source: str) -> float:
        return self.value


@dataclass(frozen=True)
class Variable(Expression):
    name: str

    def evaluate(self, variables: Mapping[str, float], source: str) -> float:
        try:
            return float(variables[self.name])
        except KeyError:
            raise InvalidFormulaError(f"No value supplied for '{self.name}'", source)


@dataclass(frozen=True)
class UnaryOp(Expression):
    op: str
    operand: Expression

    def evaluate(self, variables: Mapping[str, float], source: str) -> float:
        value = self.operand.evaluate(variables, source)
        return -value if self.op == "-" else value

    def walk(self) -> Iterator[Expression]:
        yield self
        yield from self.operand.walk()


@dataclass(frozen=True)
class BinaryOp(Expression):
    op: str
    left: Expression
    right: Expression

    def evaluate(self, variables: Mapping[str, float], source: str) -> float:
        left = self.left.evaluate(variables, source)
        right = self.right.evaluate(variables, source)
        if self.op == "+":
            return left + right
        if self.op == "-":
            return left - right
        if self.op == "*":
            return left * right
        if right == 0:
            raise DivisionByZeroError(source)
        return left / right

    def walk(self) -> Iterator[Expression]:
        yield self
        yield from self.left.walk()
        yield from self.right.walk()


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, source: str):
        self.source = source
        self.tokens = tokenize(source)
        self.index = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def _fail(self, message: str, token: Token) -> InvalidFormulaError:
        return InvalidFormulaError(message, self.source, token.position)

    def parse(self) -> Expression:
        if self.current.kind == "end":
            raise InvalidFormulaError("Empty formula")
        expression = self._expression()
        token = self.current
        if token.kind != "end":
            if token.text == ")":
                raise self._fail("Unbalanced parentheses", token)
            raise self._fail(f"Unexpected token {token.text!r}", token)
        return expression

    def _expression(self) -> Expression:
        node = self._term()
        while self.current.kind == "op" and self.current.text in "+-":
            op = self._advance().text
            node = BinaryOp(op, node, self._term())
        return node

    def _term(self) -> Expression:
        node = self._unary()
        while self.current.kind == "op" and self.current.text in "*/":
            op = self._advance().text
            node = BinaryOp(op, node, self._unary())
        return node

    def _unary(self) -> Expression:
        if self.current.kind == "op" and self.current.text in "+-":
            op = self._advance().text
            return UnaryOp(op, self._unary())
        return self._primary()

    def _primary(self) -> Expression:
        token = self.current
        if token.kind == "number":
            self._advance()
            return Number(float(token.text))
        if token.kind == "name":
            if token.text not in VARIABLES:
                raise self._fail(f"Unknown identifier '{token.text}'", token)
            self._advance()
            return Variable(token.text)
        if token.kind == "op" and token.text == "(":
            self._advance()
            node = self._expression()
            if self.current.kind == "op" and self.current.text == ")":
                self._advance()
                return node
            raise self._fail("Unbalanced parentheses", self.current)
        if token.kind == "end":
            raise self._fail("Unexpected end of formula", token)
        raise self._fail(f"Unexpected token {token.text!r}", token)


@lru_cache(maxsize=1024)
def parse_formula(source: str) -> Expression:
    """
    Parse formula text into an immutable expression tree.

    Results are memoised per source text; the cache holds only immutable
    trees, so sharing it between callers is safe.

    Raises:
        InvalidFormulaError: Empty, unbalanced, unknown identifier, stray token
    """
    return _Parser(source).parse()


@dataclass(frozen=True)
class Formula:
    """
    Symbolic measure over ``field_width`` / ``field_length``.

    Wraps the source text so a measure is explicitly either a number or a
    formula. Parsing happens on first use (see ``expression``).
    """

    source: str

    @property
    def expression(self) -> Expression:
        return parse_formula(self.source)

    def __str__(self) -> str:
        return self.source


Measure = Union[float, Formula]


def field_variables(width: float, length: float) -> Dict[str, float]:
    """Variable table for a concrete field size."""
    return {FIELD_WIDTH: float(width), FIELD_LENGTH: float(length)}


def evaluate(formula: Union[float, int, str, Formula], variables: Mapping[str, float]) -> float:
    """
    Resolve a measure against concrete field dimensions.

    Args:
        formula: Number (returned unchanged), formula text or Formula
        variables: Values for ``field_width`` and ``field_length``

    Returns:
        Resolved value in meters

    Raises:
        InvalidFormulaError: Malformed formula or non-finite result
        DivisionByZeroError: Zero denominator

    Example:
        >>> evaluate("field_width / 2", {"field_width": 64, "field_length": 100})
        32.0
    """
    if isinstance(formula, bool):
        raise InvalidFormulaError(f"Boolean is not a valid measure: {formula!r}")
    if isinstance(formula, (int, float)):
        return formula

    if isinstance(formula, Formula):
        source = formula.source
    elif isinstance(formula, str):
        source = formula
    else:
        raise InvalidFormulaError(f"Unsupported measure type {type(formula).__name__}")

    result = parse_formula(source).evaluate(variables, source)
    if not math.isfinite(result):
        raise InvalidFormulaError("Formula produced a non-finite result", source)
    return result


def _mentions_field(node: Expression) -> bool:
    return any(isinstance(n, Variable) for n in node.walk())


def _literal(node: Expression) -> Optional[Number]:
    while isinstance(node, UnaryOp):
        node = node.operand
    return node if isinstance(node, Number) else None


def constant_literals(formula: Union[float, int, str, Formula]) -> List[float]:
    """
    Numeric literals of a measure that read as domain constants.

    A literal that scales a field dimension (the ``2`` in
    ``(field_width - 40.3) / 2``) is a proportion, not a measurement, and is
    left out. Literals scaling other literals (``2 * 5.5``) are kept.
    Zero is never a domain constant.
    """
    if isinstance(formula, bool):
        return []
    if isinstance(formula, (int, float)):
        return [float(formula)] if formula != 0 else []

    source = formula.source if isinstance(formula, Formula) else formula
    expression = parse_formula(source)

    skipped = set()
    for node in expression.walk():
        if not (isinstance(node, BinaryOp) and node.op in "*/"):
            continue
        for operand, other in ((node.left, node.right), (node.right, node.left)):
            literal = _literal(operand)
            if literal is not None and _mentions_field(other):
                skipped.add(id(literal))

    return [
        node.value
        for node in expression.walk()
        if isinstance(node, Number) and id(node) not in skipped and node.value != 0
    ]
