"""Prompt builder for the agent."""

from __future__ import annotations

from typing import Iterable

from ..tools import Tool

OBSERVATION_MARKER = "Observation:"

SYSTEM_PROMPT_BASE = """You are a smart assistant with access to the following tools:
{tools_description}

When answering the user, you may use the tools to gather information or calculate results.
Follow this format strictly:
Thought: <your reasoning here>
Action: <ToolName>[<tool input>]

After an Action, stop and wait. The result will be given to you as a message starting with "Observation:".
Never write "Observation:" yourself.
... (you can repeat Thought/Action as needed) ...

When the answer is directly known, or once you have gathered enough information, reply with:
Thought: <final reasoning>
Answer: <your final answer to the user's query>

Only provide one action at a time."""


def build_system_prompt(tools: Iterable[Tool]) -> str:
    """Build the system prompt listing the available tools.

    Args:
        tools: Tools the model may request, in the order to present them.

    Returns:
        Complete system prompt string.
    """
    lines = [tool.describe() for tool in tools]
    tools_desc = "\n".join(lines) if lines else "No tools available."
    return SYSTEM_PROMPT_BASE.format(tools_description=tools_desc)


def format_observation(text: str) -> str:
    """Format a tool result for the conversation."""
    return f"{OBSERVATION_MARKER} {text}"
