"""Calculator tool for arithmetic expressions."""

import re

from .arithmetic import ExpressionError, evaluate, format_number
from .base import Tool

# Characters an expression may contain: digits, . + - * / ( ) and whitespace
ALLOWED_EXPRESSION = re.compile(r"^[0-9.+\-*/()\s]+$")


class CalculatorTool(Tool):
    """Tool for evaluating arithmetic expressions."""

    @property
    def name(self) -> str:
        return "Calculator"

    @property
    def description(self) -> str:
        return "Performs arithmetic calculations. Usage: Calculator[expression]"

    def _is_allowed(self, expression: str) -> bool:
        """Check the expression only uses whitelisted characters."""
        return ALLOWED_EXPRESSION.match(expression) is not None

    async def execute(self, argument: str) -> str:
        if not self._is_allowed(argument):
            return "Invalid expression"

        try:
            return format_number(evaluate(argument))
        except (ArithmeticError, ExpressionError) as e:
            return f"Error: {e}"
