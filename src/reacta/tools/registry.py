"""Tool registry for managing and dispatching tools."""

import logging
from typing import Iterator

from .base import Tool, ToolResult

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry for available tools.

    Names are matched case-insensitively but otherwise exactly.
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    @staticmethod
    def _key(name: str) -> str:
        return name.strip().lower()

    def register(self, tool: Tool) -> None:
        """Register a tool."""
        key = self._key(tool.name)
        if key in self._tools:
            raise ValueError(f"Tool '{tool.name}' already registered")
        self._tools[key] = tool

    def get(self, name: str) -> Tool | None:
        """Get a tool by name."""
        return self._tools.get(self._key(name))

    def list_tools(self) -> list[str]:
        """List all registered tool names."""
        return [tool.name for tool in self._tools.values()]

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[Tool]:
        return iter(list(self._tools.values()))

    async def dispatch(self, tool_name: str, argument: str) -> ToolResult:
        """Dispatch a tool call by name with its argument."""
        tool = self.get(tool_name)

        if tool is None:
            return ToolResult(
                success=False,
                output="",
                error=f'Tool "{tool_name}" not found',
            )

        try:
            output = await tool.execute(argument)
        except Exception as e:
            logger.warning("Tool %s failed: %s", tool.name, e)
            return ToolResult(
                success=False,
                output="",
                error=f"Error: {e}",
            )

        return ToolResult(success=True, output=str(output))
