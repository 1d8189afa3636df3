"""Recursive-descent evaluator for plain arithmetic expressions.

Grammar:

    expr    := term (("+" | "-") term)*
    term    := unary (("*" | "/") unary)*
    unary   := ("+" | "-") unary | primary
    primary := NUMBER | "(" expr ")"

Only numbers, the four binary operators, unary sign and parentheses are
understood. Nothing here executes code.
"""

import re
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

Number = int | float

TOKEN_PATTERN = re.compile(r"\s*(?:(\d+\.?\d*|\.\d+)|(.))")
MAX_DEPTH = 100


class ExpressionError(ValueError):
    """The expression is not well formed."""


@dataclass(frozen=True)
class Token:
    kind: str  # "number", "op" or "end"
    text: str


def tokenize(expression: str) -> list[Token]:
    """Split an expression into number and operator tokens."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(expression):
        match = TOKEN_PATTERN.match(expression, pos)
        if match is None:
            # Only trailing whitespace is left
            break
        number, symbol = match.groups()
        if number is not None:
            tokens.append(Token("number", number))
        elif symbol in "+-*/()":
            tokens.append(Token("op", symbol))
        else:
            raise ExpressionError(f"Unexpected character '{symbol}'")
        pos = match.end()
    tokens.append(Token("end", ""))
    return tokens


class _Parser:
    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0
        self._depth = 0

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _next(self) -> Token:
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def parse(self) -> Number:
        if self._peek().kind == "end":
            raise ExpressionError("Empty expression")
        value = self._expr()
        token = self._peek()
        if token.kind != "end":
            raise ExpressionError(f"Unexpected token '{token.text}'")
        return value

    def _expr(self) -> Number:
        value = self._term()
        while self._peek().kind == "op" and self._peek().text in ("+", "-"):
            op = self._next().text
            rhs = self._term()
            value = value + rhs if op == "+" else value - rhs
        return value

    def _term(self) -> Number:
        value = self._unary()
        while self._peek().kind == "op" and self._peek().text in ("*", "/"):
            op = self._next().text
            rhs = self._unary()
            if op == "*":
                value = value * rhs
            else:
                if rhs == 0:
                    raise ZeroDivisionError("division by zero")
                value = value / rhs
        return value

    def _unary(self) -> Number:
        token = self._peek()
        if token.kind == "op" and token.text in ("+", "-"):
            self._next()
            with self._nested():
                operand = self._unary()
            return -operand if token.text == "-" else operand
        return self._primary()

    def _primary(self) -> Number:
        token = self._next()
        if token.kind == "number":
            return float(token.text) if "." in token.text else int(token.text)
        if token.text == "(":
            with self._nested():
                value = self._expr()
            closing = self._next()
            if closing.text != ")":
                raise ExpressionError("Missing closing parenthesis")
            return value
        if token.kind == "end":
            raise ExpressionError("Unexpected end of expression")
        raise ExpressionError(f"Unexpected token '{token.text}'")

    @contextmanager
    def _nested(self) -> Iterator[None]:
        self._depth += 1
        if self._depth > MAX_DEPTH:
            raise ExpressionError("Expression nested too deeply")
        try:
            yield
        finally:
            self._depth -= 1


def evaluate(expression: str) -> Number:
    """Evaluate an arithmetic expression.

    Raises:
        ExpressionError: If the expression is malformed.
        ZeroDivisionError: On division by zero.
    """
    return _Parser(tokenize(expression)).parse()


def format_number(value: Number) -> str:
    """Render a result the way a calculator would display it."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)
