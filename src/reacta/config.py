"""Runtime configuration loaded from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path

from .agent import AgentConfig
from .agent.llm import DEFAULT_MODEL


class ConfigError(Exception):
    """Required configuration is missing or invalid."""


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


@dataclass
class Settings:
    """Process-wide settings, read once at startup and injected downward."""

    api_key: str
    model: str = DEFAULT_MODEL
    max_steps: int = 10
    timeout: float = 60.0
    host: str = "0.0.0.0"
    port: int = 8000
    log_dir: Path | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables.

        Raises:
            ConfigError: If GROQ_API_KEY is unset or a value is malformed.
        """
        api_key = os.getenv("GROQ_API_KEY")
        if not api_key:
            raise ConfigError("GROQ_API_KEY is not set in environment.")

        log_dir = os.getenv("REACTA_LOG_DIR")

        return cls(
            api_key=api_key,
            model=os.getenv("GROQ_MODEL") or DEFAULT_MODEL,
            max_steps=_int_env("REACTA_MAX_STEPS", 10),
            timeout=_float_env("REACTA_TIMEOUT", 60.0),
            host=os.getenv("REACTA_HOST", "0.0.0.0"),
            port=_int_env("PORT", 8000),
            log_dir=Path(log_dir) if log_dir else None,
        )

    def agent_config(self) -> AgentConfig:
        """Project the loop-relevant settings."""
        try:
            return AgentConfig(model=self.model, max_steps=self.max_steps)
        except ValueError as e:
            raise ConfigError(f"REACTA_MAX_STEPS: {e}") from e
