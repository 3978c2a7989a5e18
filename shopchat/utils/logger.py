"""
Structured logging for the chat backend.
Every record carries the active session id so one conversation can be followed
across the classifier, the store and the action calls.
"""

import logging
import json
from typing import Any
from contextvars import ContextVar

# Session id of the turn currently being handled (per asyncio task)
session_id_ctx: ContextVar[str | None] = ContextVar("session_id", default=None)


class StructuredFormatter(logging.Formatter):
    """
    Formats records as one JSON object per line.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }

        session_id = session_id_ctx.get()
        if session_id:
            log_data["session_id"] = session_id

        if hasattr(record, "fields"):
            log_data.update(record.fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False)


class StructuredLogger:
    """
    Thin wrapper over a stdlib logger taking an event name plus keyword fields.

    Example:
        logger.info("intent_classified", intent="greeting", confidence=0.9)
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _log(self, level: int, event: str, exc_info: bool = False, **fields: Any) -> None:
        self.logger.log(level, event, extra={"fields": fields}, exc_info=exc_info)

    def debug(self, event: str, **fields: Any) -> None:
        """Log debug event with context."""
        self._log(logging.DEBUG, event, **fields)

    def info(self, event: str, **fields: Any) -> None:
        """Log info event with context."""
        self._log(logging.INFO, event, **fields)

    def warning(self, event: str, exc_info: bool = False, **fields: Any) -> None:
        """Log warning event with context."""
        self._log(logging.WARNING, event, exc_info=exc_info, **fields)

    def error(self, event: str, exc_info: bool = False, **fields: Any) -> None:
        """
        Log error event with context.

        Args:
            event: Event name
            exc_info: If True, include exception traceback
            **fields: Additional context fields
        """
        self._log(logging.ERROR, event, exc_info=exc_info, **fields)


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name)


def set_session_id(session_id: str | None) -> None:
    """Binds a session id to the current context."""
    session_id_ctx.set(session_id)


def get_session_id() -> str | None:
    """Returns the session id bound to the current context."""
    return session_id_ctx.get()


def configure_logging(level: str = "INFO", use_structured: bool = True) -> None:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        use_structured: If True, use structured JSON logging
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)

    if use_structured:
        formatter = StructuredFormatter(datefmt="%Y-%m-%d %H:%M:%S")
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
