"""
Structured logging for AgentForge.

Log lines are emitted to the terminal and, optionally, as JSON onto a queue
that the web service drains. Fields that look like credentials are
redacted before anything is written.

Usage:
    from agentforge.logging import get_logger

    logger = get_logger("gateway")
    logger.info("Dispatching chat", provider="openrouter", messages=3)
    logger.request("openrouter", "deepseek/deepseek-r1:free")
"""

import json
import sys
import time
from enum import Enum
from typing import Any, Optional
from dataclasses import dataclass, asdict


REDACTED = "[REDACTED]"
_SECRET_KEYS = ("api_key", "apikey", "authorization", "token", "secret", "password")


class LogLevel(Enum):
    """Log severity levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


def redact(details: dict) -> dict:
    """Replace values of credential-like keys, recursing into nested dicts."""
    clean = {}
    for key, value in details.items():
        if any(s in key.lower() for s in _SECRET_KEYS):
            clean[key] = REDACTED if value else value
        elif isinstance(value, dict):
            clean[key] = redact(value)
        else:
            clean[key] = value
    return clean


@dataclass
class LogEntry:
    """Structured log entry."""
    ts: float           # Unix timestamp
    module: str
    level: str
    msg: str
    tag: Optional[str] = None       # REQUEST / REPLY / FALLBACK
    details: Optional[dict] = None

    def to_json(self) -> str:
        """Convert to JSON string, omitting None fields."""
        data = {k: v for k, v in asdict(self).items() if v is not None}
        return json.dumps(data, ensure_ascii=False, default=str)

    def to_console(self) -> str:
        """Format for console output with colors."""
        colors = {
            "DEBUG": "\033[90m",
            "INFO": "\033[97m",
            "WARN": "\033[93m",
            "ERROR": "\033[91m",
        }
        reset = "\033[0m"

        color = colors.get(self.level, "")
        timestamp = time.strftime("%H:%M:%S", time.localtime(self.ts))
        details_str = ""
        if self.details:
            details_str = " " + " ".join(f"{k}={v}" for k, v in self.details.items())

        if self.tag:
            return f"{color}[{timestamp}] [{self.tag}] {self.msg}{details_str}{reset}"
        return f"{color}[{timestamp}] [{self.level}] [{self.module}] {self.msg}{details_str}{reset}"


class StructuredLogger:
    """
    Structured logger with console and JSON output.

    Args:
        module: Module name for identification
        queue: Optional queue receiving JSON lines
        min_level: Minimum level to log (default: INFO)
        json_format: Print JSON instead of colored console lines
    """

    _LEVEL_ORDER = {
        LogLevel.DEBUG: 0,
        LogLevel.INFO: 1,
        LogLevel.WARN: 2,
        LogLevel.ERROR: 3,
    }

    def __init__(
        self,
        module: str,
        queue: Optional[Any] = None,
        min_level: LogLevel = LogLevel.INFO,
        json_format: bool = False,
    ):
        self.module = module
        self.queue = queue
        self.min_level = min_level
        self.json_format = json_format

    def _should_log(self, level: LogLevel) -> bool:
        return self._LEVEL_ORDER[level] >= self._LEVEL_ORDER[self.min_level]

    def log(
        self,
        level: LogLevel,
        msg: str,
        tag: Optional[str] = None,
        **extra
    ) -> Optional[LogEntry]:
        """
        Log a message with optional extra fields.

        Returns the emitted entry, or None when filtered by level.
        """
        if not self._should_log(level):
            return None

        entry = LogEntry(
            ts=time.time(),
            module=self.module,
            level=level.value,
            msg=msg,
            tag=tag,
            details=redact(extra) if extra else None
        )

        line = entry.to_json() if self.json_format else entry.to_console()
        try:
            print(line, file=sys.stderr)
        except (OSError, UnicodeEncodeError):
            sys.__stderr__.write(entry.to_json() + "\n")

        if self.queue is not None:
            try:
                self.queue.put_nowait(entry.to_json())
            except Exception:
                pass  # a full or closed sink must not break a chat call
        return entry

    def debug(self, msg: str, **extra) -> Optional[LogEntry]:
        return self.log(LogLevel.DEBUG, msg, **extra)

    def info(self, msg: str, **extra) -> Optional[LogEntry]:
        return self.log(LogLevel.INFO, msg, **extra)

    def warn(self, msg: str, **extra) -> Optional[LogEntry]:
        return self.log(LogLevel.WARN, msg, **extra)

    def error(self, msg: str, **extra) -> Optional[LogEntry]:
        return self.log(LogLevel.ERROR, msg, **extra)

    # ========== Gateway-Specific Methods ==========

    def request(self, provider: str, model: str, **extra) -> Optional[LogEntry]:
        """Log an outgoing chat request."""
        return self.log(LogLevel.INFO, f"{provider} -> {model}", tag="REQUEST", **extra)

    def reply(self, provider: str, chars: int) -> Optional[LogEntry]:
        """Log a successful reply."""
        return self.log(LogLevel.INFO, f"{provider} replied", tag="REPLY", chars=chars)

    def fallback(self, provider: str, **extra) -> Optional[LogEntry]:
        """Log a relay fallback attempt."""
        return self.log(LogLevel.WARN, f"{provider} blocked, retrying via relay", tag="FALLBACK", **extra)


# ========== Logger Factory ==========

_loggers: dict[str, StructuredLogger] = {}
_global_queue: Optional[Any] = None
_default_level: LogLevel = LogLevel.INFO
_json_format: bool = False


def set_global_queue(queue: Any) -> None:
    """Set the queue sink for all loggers."""
    global _global_queue
    _global_queue = queue
    for logger in _loggers.values():
        logger.queue = queue


def get_logger(module: str, min_level: Optional[LogLevel] = None) -> StructuredLogger:
    """
    Get or create a logger for the given module.

    Args:
        module: Module name
        min_level: Minimum log level (only used on first creation)

    Returns:
        StructuredLogger instance
    """
    if module not in _loggers:
        _loggers[module] = StructuredLogger(
            module, _global_queue, min_level or _default_level, _json_format
        )
    return _loggers[module]


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Apply level and output format to every existing and future logger."""
    global _default_level, _json_format
    _default_level = LogLevel.__members__.get(level.upper(), LogLevel.INFO)
    _json_format = json_format
    for logger in _loggers.values():
        logger.min_level = _default_level
        logger.json_format = json_format
