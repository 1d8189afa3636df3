"""Parse actions and final answers out of model text.

The model speaks a small line-oriented grammar:

    Thought: <reasoning>
    Action: ToolName[argument]

or, to finish:

    Thought: <reasoning>
    Answer: <final answer>

Both productions are optional in any given message. Absence of a match is a
normal outcome and is reported as ``None``.
"""

import re
from dataclasses import dataclass

# Tool name may not span lines or contain brackets; argument is non-empty.
ACTION_PATTERN = re.compile(r"Action:\s*([^\[\]\n]+)\[([^\]]+)\]")
ANSWER_PATTERN = re.compile(r"Answer:\s*(.*)\Z", re.DOTALL)


@dataclass(frozen=True)
class ToolAction:
    """A tool invocation requested by the model."""

    tool_name: str
    argument: str


def parse_action(text: str) -> ToolAction | None:
    """Return the first ``Action: Name[arg]`` in the text, or None.

    Anything after the first match is ignored.
    """
    match = ACTION_PATTERN.search(text)
    if match is None:
        return None
    return ToolAction(tool_name=match.group(1).strip(), argument=match.group(2).strip())


def extract_answer(text: str) -> str | None:
    """Return the trimmed text following ``Answer:``, or None.

    An ``Answer:`` marker with nothing after it does not count as an answer.
    """
    match = ANSWER_PATTERN.search(text)
    if match is None:
        return None
    return match.group(1).strip() or None
