"""Conversation messages and the append-only transcript."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class Role(Enum):
    """Author of a message in the transcript."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """A single role-tagged message."""

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        """Render in the chat completions wire format."""
        return {"role": self.role.value, "content": self.content}


class Transcript:
    """Ordered conversation history for one agent run.

    Messages can only be appended. The order is replayed verbatim to the
    model on every step, so nothing already recorded is ever edited or
    removed.
    """

    def __init__(self, messages: list[Message] | None = None) -> None:
        self._messages: list[Message] = list(messages or [])

    @classmethod
    def seed(cls, system_prompt: str, query: str) -> Transcript:
        """Build the initial transcript: system prompt followed by the query."""
        return cls([
            Message(Role.SYSTEM, system_prompt),
            Message(Role.USER, query),
        ])

    def append(self, message: Message) -> None:
        """Add a message to the end of the transcript."""
        self._messages.append(message)

    @property
    def last(self) -> Message | None:
        """Most recent message, if any."""
        return self._messages[-1] if self._messages else None

    def last_assistant(self) -> Message | None:
        """Most recent assistant message, if any."""
        for message in reversed(self._messages):
            if message.role is Role.ASSISTANT:
                return message
        return None

    def to_dicts(self) -> list[dict[str, str]]:
        return [m.to_dict() for m in self._messages]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]
