"""CLI interface for Reacta."""

import sys

from .agent import AgentLoop, AgentResult, ModelInvocationError, StopReason

BANNER = """
\033[36m   ____                 _
  |  _ \\ ___  __ _  ___| |_ __ _
  | |_) / _ \\/ _` |/ __| __/ _` |
  |  _ <  __/ (_| | (__| || (_| |
  |_| \\_\\___|\\__,_|\\___|\\__\\__,_|

    [ reason / act / observe ]
\033[0m"""

HELP = """
Commands:
  /exit, /quit  - Exit the CLI
  /help         - Show this help

Every question is answered in a fresh run; nothing carries over.
"""


def format_result(result: AgentResult) -> str:
    """Format an agent result for display."""
    output = ["\n" + "─" * 40]
    output.append(result.answer)
    output.append("─" * 40)

    if result.stop_reason != StopReason.COMPLETE:
        output.append(f"⚠ Stopped: {result.stop_reason.value} (steps: {result.steps})")
    else:
        output.append(f"steps: {result.steps}, tool calls: {len(result.tool_calls)}")

    return "\n".join(output)


class CLI:
    """Interactive command-line interface: one agent run per line."""

    def __init__(self, agent: AgentLoop) -> None:
        self.agent = agent

    async def _process_message(self, message: str) -> None:
        """Process a user message through the agent."""
        try:
            result = await self.agent.run(message)
        except ModelInvocationError as e:
            print(f"\n❌ Error: {e}")
            return
        print(format_result(result))

    def _handle_command(self, command: str) -> bool:
        """Handle a special command. Returns True if should continue, False to exit."""
        cmd = command.lower().strip()

        if cmd in ("/exit", "/quit", "exit", "quit"):
            print("\n👋 Goodbye!")
            return False

        if cmd == "/help":
            print(HELP)
            return True

        return True  # Unknown command, continue

    async def run(self) -> None:
        """Run the interactive CLI."""
        print(BANNER)
        print(HELP)

        while True:
            try:
                user_input = input("you> ").strip()
            except (KeyboardInterrupt, EOFError):
                print("\n👋 Goodbye!")
                break

            if not user_input:
                continue

            if user_input.startswith("/") or user_input.lower() in ("exit", "quit"):
                if not self._handle_command(user_input):
                    break
                continue

            await self._process_message(user_input)


async def ask_once(agent: AgentLoop, question: str) -> int:
    """Answer a single question. Returns a process exit status."""
    try:
        result = await agent.run(question)
    except ModelInvocationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(result.answer)
    return 0
