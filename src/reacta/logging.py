"""JSONL logging for agent runs."""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


@dataclass
class LogEntry:
    """A single log entry."""

    timestamp: str
    event: str
    run_id: str | None = None
    step: int | None = None
    tool_name: str | None = None
    duration_ms: float | None = None
    stop_reason: str | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding None values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {}}


class JSONLLogger:
    """Logger that writes structured run events in JSONL format."""

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = "runs.jsonl",
        max_size_mb: float = 10.0,
    ) -> None:
        if log_dir is None:
            log_dir = Path.home() / ".reacta" / "logs"
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def _rotate_if_needed(self) -> None:
        """Rotate log file if it exceeds max size."""
        if not self.log_path.exists():
            return

        if self.log_path.stat().st_size >= self.max_size_bytes:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
            rotated_name = f"{self.log_path.stem}_{timestamp}.jsonl"
            self.log_path.rename(self.log_dir / rotated_name)

    def _write(self, entry: LogEntry) -> None:
        """Write a log entry to the file."""
        self._rotate_if_needed()

        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")

    def log(
        self,
        event: str,
        *,
        run_id: str | None = None,
        step: int | None = None,
        tool_name: str | None = None,
        duration_ms: float | None = None,
        stop_reason: str | None = None,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        """Log an event."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            run_id=run_id,
            step=step,
            tool_name=tool_name,
            duration_ms=duration_ms,
            stop_reason=stop_reason,
            error=error,
            extra=extra if extra else {},
        )
        self._write(entry)

    def log_run_start(self, run_id: str, query: str) -> None:
        """Log the start of an agent run."""
        self.log("run_start", run_id=run_id, query=query)

    def log_llm_request(self, run_id: str, step: int, model: str, messages_count: int) -> None:
        """Log a model request."""
        self.log(
            "llm_request",
            run_id=run_id,
            step=step,
            model=model,
            messages_count=messages_count,
        )

    def log_llm_response(
        self,
        run_id: str,
        step: int,
        content: str,
        duration_ms: float,
    ) -> None:
        """Log a model response."""
        self.log(
            "llm_response",
            run_id=run_id,
            step=step,
            duration_ms=duration_ms,
            content=content[:2000],  # Truncate long outputs
        )

    def log_tool_call(self, run_id: str, step: int, tool_name: str, argument: str) -> None:
        """Log a tool call requested by the model."""
        self.log("tool_call", run_id=run_id, step=step, tool_name=tool_name, argument=argument)

    def log_tool_result(
        self,
        run_id: str,
        step: int,
        tool_name: str,
        success: bool,
        output: str,
        *,
        duration_ms: float | None = None,
        error: str | None = None,
    ) -> None:
        """Log a tool result."""
        self.log(
            "tool_result",
            run_id=run_id,
            step=step,
            tool_name=tool_name,
            duration_ms=duration_ms,
            error=error if not success else None,
            success=success,
            output=output[:2000],
        )

    def log_agent_stop(self, run_id: str, stop_reason: str, steps: int) -> None:
        """Log when the agent loop stops."""
        self.log("agent_stop", run_id=run_id, step=steps, stop_reason=stop_reason)

    def log_error(self, run_id: str, error: str) -> None:
        """Log a fatal error during a run."""
        self.log("error", run_id=run_id, error=error)


# Global logger instance
_logger: JSONLLogger | None = None


def get_logger() -> JSONLLogger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = JSONLLogger()
    return _logger


def configure_logger(log_dir: str | Path | None = None, max_size_mb: float = 10.0) -> JSONLLogger:
    """Configure and return the global logger."""
    global _logger
    _logger = JSONLLogger(log_dir=log_dir, max_size_mb=max_size_mb)
    return _logger
