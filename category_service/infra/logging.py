"""Structured logging configuration using structlog.

JSON output for deployed environments, colored console output in dev.
Request-scoped fields (request id, method, path) travel through
structlog contextvars so every log line of a request carries them.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from category_service.config import Settings, settings as default_settings


def setup_logging(config: Settings | None = None) -> None:
    """Configure structlog for the application.

    Sets up:
    - JSON formatting outside of dev
    - Console formatting for development
    - Integration with standard logging
    """
    config = config or default_settings
    level = logging.getLevelName(config.log_level.upper())
    use_json = config.log_json and config.environment != "dev"

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if use_json:
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
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if config.debug else logging.WARNING
    )


def bind_request_context(**context: Any) -> None:
    """Bind fields to every log line emitted while handling the current request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**context)


def clear_request_context() -> None:
    """Drop request-scoped log fields."""
    structlog.contextvars.clear_contextvars()


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Logger name (usually __name__)
        **initial_context: Initial context to bind to the logger

    Returns:
        Bound structlog logger
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
