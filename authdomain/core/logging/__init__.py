"""
Logging configuration module for structured logging.

This module configures the package's logging system using structlog.
It provides structured logging with JSON formatting for production
and human-readable console output for development.

The logging configuration includes:
- Timestamp formatting
- Log level inclusion and filtering
- JSON/Console output based on settings
- Logger caching
"""

import logging
from typing import Optional

import structlog

from authdomain.core.config.settings import settings


def configure_logging(log_level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Configures the structlog pipeline used by every module of the package.

    The engine itself only emits log records; embedding applications call this
    once at startup (or configure structlog themselves).

    Args:
        log_level: Minimum level to emit, defaults to ``settings.LOG_LEVEL``.
        json_logs: Render JSON instead of console output, defaults to ``settings.LOG_JSON``.
    """
    level_name = (log_level or settings.LOG_LEVEL).upper()
    use_json = settings.LOG_JSON if json_logs is None else json_logs

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level_name)
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Package-level logger for modules that do not bind their own name
logger = structlog.get_logger("authdomain")
