"""Tool registry and tool implementations."""

from .base import Tool, ToolResult
from .calculator import CalculatorTool
from .registry import ToolRegistry


def default_registry() -> ToolRegistry:
    """Build a registry with the built-in tools."""
    registry = ToolRegistry()
    registry.register(CalculatorTool())
    return registry


__all__ = [
    "CalculatorTool",
    "Tool",
    "ToolResult",
    "ToolRegistry",
    "default_registry",
]
