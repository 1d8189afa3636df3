"""Tests for agent loop."""

import json

import pytest

from reacta.agent import (
    AgentConfig,
    AgentLoop,
    AgentRunState,
    LoopState,
    Message,
    ModelInvocationError,
    Role,
    StopReason,
    Transcript,
    next_state,
)
from reacta.logging import JSONLLogger
from reacta.tools import Tool, ToolRegistry, default_registry


class ScriptedInvoker:
    """ModelInvoker returning canned replies and recording each request."""

    def __init__(self, replies: list[str], repeat_last: bool = False):
        self.replies = list(replies)
        self.repeat_last = repeat_last
        self.requests: list[list[Message]] = []

    async def complete(self, messages: list[Message]) -> str:
        self.requests.append(list(messages))
        if self.repeat_last and len(self.replies) == 1:
            return self.replies[0]
        return self.replies.pop(0)


class FailingInvoker:
    async def complete(self, messages: list[Message]) -> str:
        raise ModelInvocationError("Model API error: HTTP 503 - unavailable")


class ExplodingTool(Tool):
    """Tool that always raises."""

    @property
    def name(self) -> str:
        return "Explode"

    @property
    def description(self) -> str:
        return "Always fails"

    async def execute(self, argument: str) -> str:
        raise RuntimeError(f"boom: {argument}")


@pytest.fixture
def registry() -> ToolRegistry:
    reg = default_registry()
    reg.register(ExplodingTool())
    return reg


class TestNextState:
    """The transition table, edge by edge."""

    def _run(self, step: int = 0, answer: str | None = None) -> AgentRunState:
        return AgentRunState(transcript=Transcript(), step=step, final_answer=answer)

    def test_invoke_model_goes_to_dispatch(self):
        assert next_state(LoopState.INVOKE_MODEL, self._run(), 10) is LoopState.DISPATCH_TOOL

    def test_dispatch_goes_to_check(self):
        assert next_state(LoopState.DISPATCH_TOOL, self._run(), 10) is LoopState.CHECK_ANSWER

    def test_check_continues_without_answer(self):
        assert next_state(LoopState.CHECK_ANSWER, self._run(step=3), 10) is LoopState.INVOKE_MODEL

    def test_check_ends_with_answer(self):
        run = self._run(step=1, answer="4")
        assert next_state(LoopState.CHECK_ANSWER, run, 10) is LoopState.END

    def test_check_ends_at_step_limit(self):
        assert next_state(LoopState.CHECK_ANSWER, self._run(step=10), 10) is LoopState.END

    def test_end_is_absorbing(self):
        assert next_state(LoopState.END, self._run(), 10) is LoopState.END


class TestAgentRunState:
    def test_finish_only_once(self):
        run = AgentRunState(transcript=Transcript())
        run.finish("done")
        with pytest.raises(RuntimeError):
            run.finish("again")
        assert run.final_answer == "done"

    def test_advance(self):
        run = AgentRunState(transcript=Transcript())
        run.advance()
        run.advance()
        assert run.step == 2


def test_config_rejects_zero_steps():
    with pytest.raises(ValueError):
        AgentConfig(max_steps=0)


@pytest.mark.asyncio
async def test_calculator_then_answer(registry: ToolRegistry) -> None:
    """Action, observation, then answer on the next cycle."""
    invoker = ScriptedInvoker([
        "Thought: I should add.\nAction: Calculator[2+2]",
        "Thought: I know it now.\nAnswer: 4",
    ])
    agent = AgentLoop(registry, invoker)
    result = await agent.run("What is 2+2?")

    assert result.answer == "4"
    assert result.stop_reason == StopReason.COMPLETE
    assert result.steps == 1
    assert len(result.tool_calls) == 1
    assert result.tool_calls[0].tool_name == "Calculator"

    contents = [m.content for m in result.transcript]
    assert contents[3] == "Observation: 4"
    assert result.transcript[3].role is Role.SYSTEM

    # Second request sees the observation
    assert invoker.requests[1][-1].content == "Observation: 4"
    assert len(invoker.requests) == 2


@pytest.mark.asyncio
async def test_immediate_answer_stops_loop(registry: ToolRegistry) -> None:
    invoker = ScriptedInvoker(["Thought: easy.\nAnswer:   Paris  "])
    agent = AgentLoop(registry, invoker)
    result = await agent.run("Capital of France?")

    assert result.answer == "Paris"
    assert result.steps == 0
    assert len(invoker.requests) == 1
    assert len(result.transcript) == 3


@pytest.mark.asyncio
async def test_unknown_tool_observation(registry: ToolRegistry) -> None:
    invoker = ScriptedInvoker([
        "Thought: check weather.\nAction: Weather[NYC]",
        "Answer: unknown",
    ])
    agent = AgentLoop(registry, invoker)
    result = await agent.run("Weather in NYC?")

    assert result.transcript[3].content == 'Observation: Tool "Weather" not found'
    assert result.answer == "unknown"


@pytest.mark.asyncio
async def test_tool_failure_is_not_fatal(registry: ToolRegistry) -> None:
    invoker = ScriptedInvoker([
        "Action: Explode[now]",
        "Answer: it failed",
    ])
    agent = AgentLoop(registry, invoker)
    result = await agent.run("Try it")

    assert result.transcript[3].content == "Observation: Error: boom: now"
    assert result.stop_reason == StopReason.COMPLETE


@pytest.mark.asyncio
async def test_tool_lookup_is_case_insensitive(registry: ToolRegistry) -> None:
    invoker = ScriptedInvoker(["Action: calculator[3*3]", "Answer: 9"])
    agent = AgentLoop(registry, invoker)
    result = await agent.run("3*3?")

    assert result.transcript[3].content == "Observation: 9"


@pytest.mark.asyncio
async def test_no_action_appends_no_observation(registry: ToolRegistry) -> None:
    invoker = ScriptedInvoker(["Thought: hmm, let me think.", "Answer: 42"])
    agent = AgentLoop(registry, invoker)
    result = await agent.run("Meaning of life?")

    roles = [m.role for m in result.transcript]
    assert roles == [Role.SYSTEM, Role.USER, Role.ASSISTANT, Role.ASSISTANT]
    assert result.steps == 1


@pytest.mark.asyncio
async def test_only_first_action_is_dispatched(registry: ToolRegistry) -> None:
    invoker = ScriptedInvoker([
        "Action: Calculator[1+1]\nAction: Calculator[5*5]",
        "Answer: 2",
    ])
    agent = AgentLoop(registry, invoker)
    result = await agent.run("1+1?")

    assert result.transcript[3].content == "Observation: 2"
    assert len(result.tool_calls) == 1


@pytest.mark.asyncio
async def test_action_and_answer_in_same_message(registry: ToolRegistry) -> None:
    """Dispatch still happens before the answer check."""
    invoker = ScriptedInvoker(["Action: Calculator[6/3]\nAnswer: 2"])
    agent = AgentLoop(registry, invoker)
    result = await agent.run("6/3?")

    assert result.answer == "2"
    assert result.transcript[-1].content == "Observation: 2"
    assert len(invoker.requests) == 1


@pytest.mark.asyncio
async def test_step_limit_fallback(registry: ToolRegistry) -> None:
    invoker = ScriptedInvoker(["Thought: try.\nAction: Weather[NYC]"], repeat_last=True)
    agent = AgentLoop(registry, invoker)
    result = await agent.run("Weather?")

    assert result.answer == "No answer generated within step limit."
    assert result.stop_reason == StopReason.MAX_STEPS
    assert result.steps == 10
    assert len(invoker.requests) == 10
    # seed + 10 * (assistant + observation)
    assert len(result.transcript) == 22


@pytest.mark.asyncio
async def test_custom_max_steps(registry: ToolRegistry) -> None:
    invoker = ScriptedInvoker(["Thinking..."], repeat_last=True)
    agent = AgentLoop(registry, invoker, config=AgentConfig(max_steps=3))
    result = await agent.run("Loop")

    assert result.steps == 3
    assert len(invoker.requests) == 3


@pytest.mark.asyncio
async def test_transcript_is_append_only(registry: ToolRegistry) -> None:
    """Each request extends the previous one by one or two entries."""
    invoker = ScriptedInvoker([
        "Action: Calculator[1+2]",
        "Thought: still thinking",
        "Action: Nope[x]",
        "Answer: 3",
    ])
    agent = AgentLoop(registry, invoker)
    await agent.run("1+2?")

    for previous, current in zip(invoker.requests, invoker.requests[1:]):
        assert current[: len(previous)] == previous
        assert len(current) - len(previous) in (1, 2)


@pytest.mark.asyncio
async def test_model_failure_propagates(registry: ToolRegistry) -> None:
    agent = AgentLoop(registry, FailingInvoker())
    with pytest.raises(ModelInvocationError, match="HTTP 503"):
        await agent.run("Hi")


@pytest.mark.asyncio
async def test_runs_are_isolated(registry: ToolRegistry) -> None:
    agent = AgentLoop(registry, ScriptedInvoker(["Answer: a", "Answer: b"]))
    first = await agent.run("one")
    second = await agent.run("two")

    assert first.answer == "a"
    assert second.answer == "b"
    assert len(first.transcript) == len(second.transcript) == 3
    assert first.run_id != second.run_id


@pytest.mark.asyncio
async def test_seed_transcript(registry: ToolRegistry) -> None:
    invoker = ScriptedInvoker(["Answer: ok"])
    agent = AgentLoop(registry, invoker)
    await agent.run("Hello")

    first_request = invoker.requests[0]
    assert len(first_request) == 2
    assert first_request[0].role is Role.SYSTEM
    assert "Calculator: Performs arithmetic calculations" in first_request[0].content
    assert first_request[1] == Message(Role.USER, "Hello")


@pytest.mark.asyncio
async def test_run_logger_records_events(registry: ToolRegistry, tmp_path) -> None:
    run_logger = JSONLLogger(log_dir=tmp_path)
    invoker = ScriptedInvoker(["Action: Calculator[2+2]", "Answer: 4"])
    agent = AgentLoop(registry, invoker, run_logger=run_logger)
    await agent.run("2+2?", run_id="run-test")

    lines = run_logger.log_path.read_text().splitlines()
    events = [json.loads(line)["event"] for line in lines]
    assert events == [
        "run_start",
        "llm_request",
        "llm_response",
        "tool_call",
        "tool_result",
        "llm_request",
        "llm_response",
        "agent_stop",
    ]
