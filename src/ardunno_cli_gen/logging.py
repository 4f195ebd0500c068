import logging
import sys

import structlog
from structlog.typing import Processor

from ardunno_cli_gen.config import AppConfig, AppEnv

# Map pino log levels to Python logging levels
LOG_LEVEL_MAP = {
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def configure_logging(config: AppConfig) -> None:
    """Configure structlog for console (development) or JSON output on stderr."""
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="time"),
    ]

    if config.app_env == AppEnv.DEVELOPMENT:
        renderer = structlog.dev.ConsoleRenderer(colors=False, pad_level=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    level = LOG_LEVEL_MAP.get(config.log_level.value, logging.WARNING)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        # stdout belongs to the CLI
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,  # False for testing
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a lazy logger instance, optionally with a bound name.

    Module level loggers are created on import, before `configure_logging` runs. The proxy
    resolves the configuration on every call, so they follow whatever is configured last.
    """
    if name:
        return structlog.get_logger(logger=name)
    return structlog.get_logger()
