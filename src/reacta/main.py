"""Reacta entry point."""

import argparse
import asyncio
import logging
import sys

from dotenv import find_dotenv, load_dotenv

from .agent import AgentLoop, GroqModelInvoker
from .cli import BANNER, CLI, ask_once
from .config import ConfigError, Settings
from .logging import configure_logger
from .tools import default_registry


def build_agent(settings: Settings) -> AgentLoop:
    """Wire the agent loop from settings."""
    invoker = GroqModelInvoker.from_api_key(
        settings.api_key,
        model=settings.model,
        timeout=settings.timeout,
    )
    return AgentLoop(
        default_registry(),
        invoker,
        config=settings.agent_config(),
        run_logger=configure_logger(settings.log_dir),
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reacta",
        description="Reason/act/observe agent",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server (default)")
    serve_parser.add_argument("--host", help="Interface to bind")
    serve_parser.add_argument("--port", type=int, help="Port to listen on")

    ask_parser = subparsers.add_parser("ask", help="Answer one question and exit")
    ask_parser.add_argument("question", help="The question to answer")

    subparsers.add_parser("repl", help="Interactive prompt")

    return parser


def _serve(agent: AgentLoop, host: str, port: int) -> None:
    import uvicorn

    from .server import create_app

    print(BANNER)
    uvicorn.run(create_app(agent), host=host, port=port)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    args = _build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
        agent = build_agent(settings)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "ask":
        sys.exit(asyncio.run(ask_once(agent, args.question)))

    if args.command == "repl":
        asyncio.run(CLI(agent).run())
        return

    host = getattr(args, "host", None) or settings.host
    port = getattr(args, "port", None) or settings.port
    _serve(agent, host, port)


if __name__ == "__main__":
    main()
