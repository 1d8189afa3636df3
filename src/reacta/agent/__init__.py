"""Agent loop and core logic."""

from .llm import GroqModelInvoker, ModelInvocationError, ModelInvoker
from .loop import (
    AgentConfig,
    AgentLoop,
    AgentResult,
    AgentRunState,
    LoopState,
    StopReason,
    next_state,
)
from .messages import Message, Role, Transcript
from .parser import ToolAction, extract_answer, parse_action
from .prompt import build_system_prompt, format_observation

__all__ = [
    "AgentConfig",
    "AgentLoop",
    "AgentResult",
    "AgentRunState",
    "GroqModelInvoker",
    "LoopState",
    "Message",
    "ModelInvocationError",
    "ModelInvoker",
    "Role",
    "StopReason",
    "ToolAction",
    "Transcript",
    "build_system_prompt",
    "extract_answer",
    "format_observation",
    "next_state",
]
