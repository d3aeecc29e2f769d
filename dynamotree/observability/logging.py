"""Structured logging configuration using structlog.

Provides JSON logging for production and console logging for development.
Paths are logged as lists of components; since applications often key
objects by e-mail address, an optional processor masks those.
"""

import re
import sys
from collections.abc import MutableMapping
from typing import Any, cast

import structlog
from structlog.types import EventDict, WrappedLogger

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

LEVELS = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


class PathRedactor:
    """Processor that masks e-mail addresses in logged values.

    Walks strings, lists (paths) and nested dicts. The event name itself
    is left alone.
    """

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event = event_dict.get("event")
        redacted = self._redact_dict(event_dict)
        if event is not None:
            redacted["event"] = event
        return cast(EventDict, redacted)

    def _redact_dict(self, data: MutableMapping[str, Any]) -> dict[str, Any]:
        return {key: self._redact(value) for key, value in data.items()}

    def _redact(self, value: Any) -> Any:
        if isinstance(value, str):
            return EMAIL_PATTERN.sub("[EMAIL]", value)
        if isinstance(value, (list, tuple)):
            return [self._redact(item) for item in value]
        if isinstance(value, dict):
            return self._redact_dict(value)
        return value


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_paths: bool = True,
) -> None:
    """Configure structured logging.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        format: Output format - "json" for production, "console" for development
        redact_paths: Whether to mask e-mail addresses in logged values
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if redact_paths:
        processors.append(PathRedactor())

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            LEVELS.get(level.upper(), 20)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance bound to the given name.

    Args:
        name: Logger name (typically __name__ of the module)
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
