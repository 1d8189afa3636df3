"""Base tool interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class ToolResult:
    """Result from tool dispatch."""

    success: bool
    output: str
    error: str | None = None

    @property
    def observation(self) -> str:
        """Text reported back to the model."""
        if self.success:
            return self.output
        return self.error or ""


class Tool(ABC):
    """Base interface for all tools.

    A tool takes one text argument and produces text. Raising from
    ``execute`` signals failure; the registry turns it into an error result.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool name."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Tool description for LLM."""
        ...

    @abstractmethod
    async def execute(self, argument: str) -> str:
        """Execute the tool with the given argument."""
        ...

    def describe(self) -> str:
        """Render this tool for the system prompt."""
        return f"{self.name}: {self.description}"
