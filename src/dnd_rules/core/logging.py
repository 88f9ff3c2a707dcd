"""Structured logging for the dnd_rules resolution engine.

Resolvers log through structlog so that every attack, spell and turn
carries its numbers as fields (``damage=7``) instead of formatted text.
The turn pipeline binds the session id and turn index as context, so a
single session can be followed through interleaved output.

Example:
    >>> from dnd_rules.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Attack resolved", attacker="Aria", hit=True, damage=7)
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

from dnd_rules.core.config import Settings, get_settings


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


APP_NAME = "dnd_rules"

_STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every log entry with the application name."""
    event_dict["app"] = APP_NAME
    return event_dict


def _processors(json_format: bool) -> list[Processor]:
    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_format:
        return [*shared, structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [
        *shared,
        structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback),
    ]


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Configure application-wide logging.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Emit one JSON object per line instead of console output.
        log_file: Optional path that also receives standard library records.

    Example:
        >>> configure_logging(level="DEBUG", json_format=True)
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=_processors(json_format),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Standard library records share the level and the stream
    logging.basicConfig(format=_STDLIB_FORMAT, level=numeric_level, stream=sys.stdout, force=True)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(_STDLIB_FORMAT))
        logging.getLogger().addHandler(file_handler)


def configure_logging_from_settings(settings: Settings | None = None) -> None:
    """Configure logging from ``Settings.log_level`` and ``Settings.json_logs``.

    Args:
        settings: Settings to read, the cached application settings when None.
    """
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, json_format=settings.json_logs)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structlog logger, typically with ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables included in every subsequent log entry.

    Example:
        >>> bind_context(session_id="abc123", turn=4)
        >>> logger.info("Turn processed")  # includes session_id and turn
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables.

    The turn pipeline calls this once a turn is done, so context never
    leaks between sessions.
    """
    structlog.contextvars.clear_contextvars()


__all__ = [
    "APP_NAME",
    "add_app_context",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
]
