"""Agent loop implementation.

One run alternates model calls and tool dispatch over a shared transcript:

    INVOKE_MODEL -> DISPATCH_TOOL -> CHECK_ANSWER -> INVOKE_MODEL | END

``next_state`` is the whole transition table, kept free of I/O so every
edge can be tested on its own. ``AgentLoop`` performs the work attached to
each state.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum

from ..logging import JSONLLogger
from ..tools import ToolRegistry
from .llm import DEFAULT_MODEL, ModelInvocationError, ModelInvoker
from .messages import Message, Role, Transcript
from .parser import ToolAction, extract_answer, parse_action
from .prompt import build_system_prompt, format_observation

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_ANSWER = "No answer generated within step limit."


class LoopState(Enum):
    """States of the agent loop."""

    INVOKE_MODEL = "invoke_model"
    DISPATCH_TOOL = "dispatch_tool"
    CHECK_ANSWER = "check_answer"
    END = "end"


class StopReason(Enum):
    """Reasons for stopping the agent loop."""

    COMPLETE = "complete"
    MAX_STEPS = "max_steps"


@dataclass
class AgentConfig:
    """Configuration for the agent loop."""

    model: str = DEFAULT_MODEL
    max_steps: int = 10
    fallback_answer: str = DEFAULT_FALLBACK_ANSWER

    def __post_init__(self) -> None:
        if self.max_steps < 1:
            raise ValueError("max_steps must be at least 1")


@dataclass
class AgentRunState:
    """Mutable state of a single run. Never shared between runs."""

    transcript: Transcript
    step: int = 0
    final_answer: str | None = None

    def finish(self, answer: str) -> None:
        """Record the final answer. Terminal; may only happen once."""
        if self.final_answer is not None:
            raise RuntimeError("Run already has a final answer")
        self.final_answer = answer

    def advance(self) -> None:
        self.step += 1


@dataclass
class AgentResult:
    """Result from running the agent loop."""

    answer: str
    stop_reason: StopReason
    steps: int
    transcript: Transcript
    run_id: str
    tool_calls: list[ToolAction] = field(default_factory=list)


def next_state(state: LoopState, run: AgentRunState, max_steps: int) -> LoopState:
    """Pure transition function of the loop state machine."""
    if state is LoopState.INVOKE_MODEL:
        return LoopState.DISPATCH_TOOL
    if state is LoopState.DISPATCH_TOOL:
        return LoopState.CHECK_ANSWER
    if state is LoopState.CHECK_ANSWER:
        if run.final_answer is not None or run.step >= max_steps:
            return LoopState.END
        return LoopState.INVOKE_MODEL
    return LoopState.END


class AgentLoop:
    """Main agent loop: reason → act → observe.

    The loop keeps no per-run state on the instance, so a single loop can
    serve concurrent runs. The registry and system prompt are read-only.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        invoker: ModelInvoker,
        config: AgentConfig | None = None,
        run_logger: JSONLLogger | None = None,
    ) -> None:
        self.registry = registry
        self.invoker = invoker
        self.config = config or AgentConfig()
        self.run_logger = run_logger
        self.system_prompt = build_system_prompt(registry)

    def _new_run_id(self) -> str:
        """Generate a new run ID."""
        return f"run-{uuid.uuid4().hex[:8]}"

    async def run(self, query: str, run_id: str | None = None) -> AgentResult:
        """Run the agent loop for a user query.

        Args:
            query: The user's question.
            run_id: Optional identifier used in logs.

        Returns:
            AgentResult with the final (or fallback) answer and metadata.

        Raises:
            ModelInvocationError: If the model service fails. Not retried.
        """
        run_id = run_id or self._new_run_id()
        run = AgentRunState(transcript=Transcript.seed(self.system_prompt, query))
        tool_calls: list[ToolAction] = []

        if self.run_logger:
            self.run_logger.log_run_start(run_id, query)

        state = LoopState.INVOKE_MODEL
        while state is not LoopState.END:
            if state is LoopState.INVOKE_MODEL:
                await self._invoke_model(run, run_id)
            elif state is LoopState.DISPATCH_TOOL:
                action = await self._dispatch_tool(run, run_id)
                if action is not None:
                    tool_calls.append(action)
            elif state is LoopState.CHECK_ANSWER:
                self._check_answer(run)
            state = next_state(state, run, self.config.max_steps)

        if run.final_answer is not None:
            answer, stop_reason = run.final_answer, StopReason.COMPLETE
        else:
            answer, stop_reason = self.config.fallback_answer, StopReason.MAX_STEPS

        logger.info("Run %s stopped: %s after %d step(s)", run_id, stop_reason.value, run.step)
        if self.run_logger:
            self.run_logger.log_agent_stop(run_id, stop_reason.value, run.step)

        return AgentResult(
            answer=answer,
            stop_reason=stop_reason,
            steps=run.step,
            transcript=run.transcript,
            run_id=run_id,
            tool_calls=tool_calls,
        )

    async def _invoke_model(self, run: AgentRunState, run_id: str) -> None:
        """Think: append one assistant message produced by the model."""
        if self.run_logger:
            self.run_logger.log_llm_request(
                run_id, run.step, model=self.config.model, messages_count=len(run.transcript)
            )

        start_time = time.time()
        try:
            reply = await self.invoker.complete(list(run.transcript))
        except ModelInvocationError as e:
            logger.error("Run %s: model invocation failed: %s", run_id, e)
            if self.run_logger:
                self.run_logger.log_error(run_id, str(e))
            raise
        duration_ms = (time.time() - start_time) * 1000

        if self.run_logger:
            self.run_logger.log_llm_response(run_id, run.step, reply, duration_ms)

        run.transcript.append(Message(Role.ASSISTANT, reply))

    async def _dispatch_tool(self, run: AgentRunState, run_id: str) -> ToolAction | None:
        """Act and observe: run the requested tool, if any."""
        message = run.transcript.last_assistant()
        action = parse_action(message.content) if message else None
        if action is None:
            return None

        if self.run_logger:
            self.run_logger.log_tool_call(run_id, run.step, action.tool_name, action.argument)

        start_time = time.time()
        result = await self.registry.dispatch(action.tool_name, action.argument)
        duration_ms = (time.time() - start_time) * 1000

        if self.run_logger:
            self.run_logger.log_tool_result(
                run_id,
                run.step,
                action.tool_name,
                result.success,
                result.output,
                duration_ms=duration_ms,
                error=result.error,
            )

        run.transcript.append(Message(Role.SYSTEM, format_observation(result.observation)))
        return action

    def _check_answer(self, run: AgentRunState) -> None:
        """Finish on ``Answer:``, otherwise spend one step."""
        message = run.transcript.last_assistant()
        answer = extract_answer(message.content) if message else None
        if answer is not None:
            run.finish(answer)
        else:
            run.advance()
