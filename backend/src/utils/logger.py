"""
Logging configuration for the CinéLyon backend.

Configures structlog on top of the standard library logger so that every
module can log events with key/value context.
"""

import logging
import sys

import structlog

from config.settings import get_settings


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure structlog (JSON by default, console output for ``text``)."""
    settings = get_settings()
    level = (level or settings.log_level).upper()
    fmt = fmt or settings.log_format

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level, logging.INFO),
        force=True,
    )

    renderer = (
        structlog.dev.ConsoleRenderer()
        if fmt == "text"
        else structlog.processors.JSONRenderer()
    )

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
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger. Configuration is left to the entry point."""
    return structlog.get_logger(name)
