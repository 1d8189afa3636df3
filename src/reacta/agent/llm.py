"""Model invocation for the agent loop.

The loop only depends on the ``ModelInvoker`` protocol, so tests and
alternative backends can substitute their own implementation. The default
implementation wraps ``AsyncGroq``.
"""

from __future__ import annotations

import logging
from typing import Protocol

from groq import APIError, APIStatusError, AsyncGroq

from .messages import Message
from .prompt import OBSERVATION_MARKER

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama-3.3-70b-versatile"


class ModelInvocationError(Exception):
    """The model service could not produce a completion."""


class ModelInvoker(Protocol):
    """Produces the next assistant message for a transcript."""

    async def complete(self, messages: list[Message]) -> str:
        ...


class GroqModelInvoker:
    """ModelInvoker implementation backed by the Groq chat completions API.

    Generation stops at ``Observation:`` so the model cannot invent tool
    results. Requests are not retried.

    Example:
        invoker = GroqModelInvoker.from_api_key("...", model="llama-3.3-70b-versatile")
        text = await invoker.complete(list(transcript))
    """

    def __init__(
        self,
        client: AsyncGroq,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
    ) -> None:
        """Initialize the invoker.

        Args:
            client: The AsyncGroq client instance to wrap.
            model: The model to use for completions.
            temperature: Sampling temperature.
        """
        self._client = client
        self._model = model
        self._temperature = temperature

    @classmethod
    def from_api_key(
        cls,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: float | None = None,
    ) -> GroqModelInvoker:
        """Build an invoker with its own client and no retry policy."""
        if timeout is None:
            client = AsyncGroq(api_key=api_key, max_retries=0)
        else:
            client = AsyncGroq(api_key=api_key, max_retries=0, timeout=timeout)
        return cls(client, model=model)

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model

    async def complete(self, messages: list[Message]) -> str:
        """Request one completion for the given messages.

        Raises:
            ModelInvocationError: On transport failure, a non-success
                status, a malformed payload, or a response without text
                content.
        """
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[m.to_dict() for m in messages],
                stop=[OBSERVATION_MARKER],
                temperature=self._temperature,
            )
        except APIStatusError as e:
            raise ModelInvocationError(
                f"Model API error: HTTP {e.status_code} - {e.message}"
            ) from e
        except APIError as e:
            raise ModelInvocationError(f"Model API request failed: {e}") from e
        except ValueError as e:
            # Body that is not JSON, or JSON the client cannot parse
            raise ModelInvocationError(f"Invalid response from LLM ({e})") from e

        if not response.choices:
            raise ModelInvocationError("Invalid response from LLM (no choices)")

        message = response.choices[0].message
        content = message.content if message is not None else None
        if not isinstance(content, str):
            raise ModelInvocationError("Invalid response from LLM (no content)")

        logger.debug("Completion finish_reason=%s", response.choices[0].finish_reason)
        return content
