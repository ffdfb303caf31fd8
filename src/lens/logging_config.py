"""
Structured logging for the Lens application.

structlog sits on top of the standard logging module. Development runs
render readable console lines, every other environment emits one JSON
object per line.
"""

import inspect
import logging
import os
import sys
from typing import Any

import structlog

AUDIT_LOGGER = "lens.user_actions"
ERROR_LOGGER = "lens.errors"
SECURITY_LOGGER = "lens.security"
PERFORMANCE_LOGGER = "lens.performance"


def get_log_level() -> int:
    """LOG_LEVEL as a logging constant; unknown names fall back to INFO."""
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def is_development_environment() -> bool:
    return os.getenv("ENVIRONMENT", "development").lower() in ("development", "dev", "local")


def _renderer(development: bool) -> Any:
    if development:
        return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    return structlog.processors.JSONRenderer()


def configure_structured_logging() -> None:
    """Configure structlog and the root logger. Called once when the app module is imported."""
    log_level = get_log_level()
    development = is_development_environment()

    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(log_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(development),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    structlog.get_logger("lens.logging").info(
        "logging_configured",
        log_level=logging.getLevelName(log_level),
        renderer="console" if development else "json",
    )


def get_logger(name: str | None = None) -> Any:
    """
    Get a structured logger.

    Args:
        name: Logger name, defaults to the calling module's name

    Returns:
        structlog.BoundLogger: Logger instance
    """
    if name is None:
        frame = inspect.currentframe()
        caller = frame.f_back if frame else None
        name = caller.f_globals.get("__name__", "lens") if caller else "lens"

    return structlog.get_logger(name)


def log_performance(operation: str, duration: float, **context: Any) -> None:
    """Record how long an operation took, in seconds."""
    get_logger(PERFORMANCE_LOGGER).info("performance_metric", operation=operation, duration_seconds=duration, **context)


def log_user_action(user_id: str, action: str, **context: Any) -> None:
    """
    Write an audit entry for something a user did, such as creating or deleting an album.

    Args:
        user_id: uid of the acting user
        action: Action name, e.g. "album_created"
        **context: Album id, image counts and similar details
    """
    get_logger(AUDIT_LOGGER).info("user_action", user_id=user_id, action=action, **context)


def log_error(error: Exception, context: dict[str, Any] | None = None) -> None:
    get_logger(ERROR_LOGGER).error(
        "application_error",
        error_type=type(error).__name__,
        error_message=str(error),
        **(context or {}),
    )


def log_security_event(event_type: str, user_id: str | None = None, **context: Any) -> None:
    """Sign-in failures and denied album access end up here."""
    get_logger(SECURITY_LOGGER).warning("security_event", event_type=event_type, user_id=user_id, **context)


class LogContext:
    """Binds context to a logger for the duration of a block and logs an exception leaving it."""

    def __init__(self, logger: Any, **context: Any):
        self.logger = logger
        self.context = context
        self.bound_logger: Any = None

    def __enter__(self) -> Any:
        self.bound_logger = self.logger.bind(**self.context)
        return self.bound_logger

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is not None and self.bound_logger is not None:
            self.bound_logger.error(
                "context_exception", exception_type=exc_type.__name__, exception_message=str(exc_val), exc_info=exc_val
            )


def log_context(**context: Any) -> LogContext:
    """Create a ``LogContext`` around the calling module's logger."""
    frame = inspect.currentframe()
    caller = frame.f_back if frame else None
    name = caller.f_globals.get("__name__", "lens") if caller else "lens"
    return LogContext(get_logger(name), **context)
