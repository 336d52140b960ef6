"""Structured logging configuration for Hookshot.

Provides JSON-formatted structured logging using structlog.
Supports both development (colored console) and production (JSON) modes.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from structlog.typing import Processor

# Track if logging has been configured
_configured = False


def configure_logging(
    level: str = "INFO",
    format: str = "json",
) -> None:
    """Configure structured logging for Hookshot.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format: Output format - "json" for production, "text" for development.

    Example:
        ```python
        from hookshot.logging import configure_logging, get_logger

        configure_logging(level="DEBUG", format="text")
        logger = get_logger()
        logger.info("Listener started", port=4567)
        ```
    """
    global _configured

    log_level = getattr(logging, level.upper(), logging.INFO)

    # Standard library logging only carries the rendered structlog message
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(log_level)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format.lower() == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Module loggers are created at import, before settings are applied
        cache_logger_on_first_use=False,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name. Uses calling module name if None.

    Returns:
        A bound structlog logger.
    """
    if not _configured:
        configure_logging()

    return structlog.get_logger(name)  # type: ignore[no-any-return]


def bind_context(**kwargs: object) -> None:
    """Bind context variables to all subsequent log messages.

    Context is stored in contextvars, so each request task sees its own
    values. The request adapter binds the event name and delivery id here.

    Args:
        **kwargs: Key-value pairs to bind to the logging context.

    Example:
        ```python
        from hookshot.logging import bind_context, get_logger

        bind_context(event_name="push", delivery_id="72d3162e")
        logger = get_logger()
        logger.info("Dispatching")  # Includes event_name and delivery_id
        ```
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from the logging context.

    Args:
        *keys: Keys to remove from context.
    """
    structlog.contextvars.unbind_contextvars(*keys)


@contextmanager
def delivery_context(**kwargs: object) -> Iterator[None]:
    """Bind delivery fields for the duration of a block.

    Only the keys bound here are removed on exit, so context bound by an
    outer layer (e.g. a request id middleware) survives.

    Example:
        ```python
        with delivery_context(event_name="push", source="github"):
            logger.info("Dispatching")
        ```
    """
    bind_context(**kwargs)
    try:
        yield
    finally:
        unbind_context(*kwargs)


# Convenience: pre-configured logger for quick imports
logger = get_logger("hookshot")
