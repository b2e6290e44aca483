"""Structured JSONL runtime logging for pardu.

Scan workers log from their own threads, so every record carries the thread
name and writes are serialized. ``RuntimeLogger.bind`` returns a logger that
stamps fixed fields (such as the scan root) onto every record it writes.
"""

from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

from pardu.paths import log_path

LogLevel = Literal["off", "error", "warning", "info", "debug"]

_LEVEL_VALUES: dict[str, int] = {
    "off": 100,
    "error": 40,
    "warning": 30,
    "info": 20,
    "debug": 10,
}
_LEVEL_ALIASES: dict[str, LogLevel] = {
    "warn": "warning",
    "none": "off",
    "disabled": "off",
    "0": "off",
}

_runtime_logger: RuntimeLogger | None = None
_configure_lock = threading.Lock()


def parse_level(value: str | None, default: LogLevel = "warning") -> LogLevel:
    if not value:
        return default
    normalized = value.strip().lower()
    normalized = _LEVEL_ALIASES.get(normalized, normalized)
    return normalized if normalized in _LEVEL_VALUES else default  # type: ignore[return-value]


@dataclass(slots=True, frozen=True)
class RuntimeLogger:
    level: LogLevel
    sink_path: Path
    context: dict[str, Any] = field(default_factory=dict)
    write_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def enabled(self, level: str) -> bool:
        threshold = _LEVEL_VALUES[self.level]
        return threshold < _LEVEL_VALUES["off"] and _LEVEL_VALUES.get(level, _LEVEL_VALUES["debug"]) >= threshold

    def bind(self, **fields: Any) -> RuntimeLogger:
        # Bound loggers share the sink and its lock with their parent.
        return replace(self, context={**self.context, **fields})

    def log(self, level: str, event: str, **fields: Any) -> None:
        if not self.enabled(level):
            return
        record = {
            **self.context,
            **fields,
            "ts": datetime.now(UTC).isoformat(),
            "level": level,
            "event": event,
            "pid": os.getpid(),
            "thread": threading.current_thread().name,
        }
        line = json.dumps(record, sort_keys=True, default=str) + "\n"
        with self.write_lock:
            self.sink_path.parent.mkdir(parents=True, exist_ok=True)
            with self.sink_path.open("a", encoding="utf-8") as handle:
                handle.write(line)

    def debug(self, event: str, **fields: Any) -> None:
        self.log("debug", event, **fields)

    def info(self, event: str, **fields: Any) -> None:
        self.log("info", event, **fields)

    def warning(self, event: str, **fields: Any) -> None:
        self.log("warning", event, **fields)

    def error(self, event: str, **fields: Any) -> None:
        self.log("error", event, **fields)


def _disabled_logger() -> RuntimeLogger:
    return RuntimeLogger(level="off", sink_path=Path(os.devnull))


def configure_runtime_logging(
    *,
    level: str | None = None,
    log_file: str | Path | None = None,
) -> RuntimeLogger:
    """Install the process-wide logger; arguments win over PARDU_LOG_* variables."""
    global _runtime_logger

    effective_level = parse_level(level or os.getenv("PARDU_LOG_LEVEL"))
    if effective_level == "off":
        _runtime_logger = _disabled_logger()
        return _runtime_logger

    sink = log_file or os.getenv("PARDU_LOG_FILE")
    sink_path = Path(sink).expanduser().resolve() if sink else log_path()
    _runtime_logger = RuntimeLogger(level=effective_level, sink_path=sink_path)
    _runtime_logger.info("logging.configured", configured_level=effective_level, sink_path=str(sink_path))
    return _runtime_logger


def get_runtime_logger() -> RuntimeLogger:
    global _runtime_logger
    if _runtime_logger is None:
        with _configure_lock:
            if _runtime_logger is None:
                _runtime_logger = configure_runtime_logging()
    return _runtime_logger
