"""
Structured logging configuration using structlog.

Console output in development, JSON lines everywhere else. The request
middleware binds a request id into structlog's context variables, and the
auth dependency adds the acting user id, so every event logged while a
request is handled carries both without passing them around.
"""

import logging
import sys
from typing import cast

import structlog
from structlog.types import Processor

from app.config import settings

# Chatty third-party loggers and the level they are capped at
_QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "aiosqlite": logging.WARNING,
}


def _renderer() -> Processor:
    if settings.ENVIRONMENT == "development" and settings.LOG_FORMAT != "json":
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return structlog.processors.JSONRenderer()


def configure_logging() -> None:
    """
    Configure structlog and the stdlib root logger.

    Safe to call more than once (tests and reloads do); the last call wins.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _renderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        force=True,
    )

    for name, level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
    if settings.ENVIRONMENT != "development":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance with the given name.

    Example:
        logger = get_logger(__name__)
        logger.info("comment_created", comment_id=12, post_id=3)
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


def set_request_context(request_id: str) -> None:
    """Start a fresh logging context for a request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)


def set_user_context(user_id: int) -> None:
    """Attach the authenticated user id once the principal has been resolved."""
    structlog.contextvars.bind_contextvars(user_id=user_id)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
