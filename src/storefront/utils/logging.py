"""Logging for the storefront.

Records go through stdlib logging (stdout plus one rotating file) and are
rendered by structlog: colored key/value lines in development, JSON lines in
production. Request-scoped values bound with ``add_context`` ride along on
every record until ``clear_context``.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

LEVELS = {"production": "INFO", "development": "DEBUG", "test": "WARNING"}

# Chatty third-party loggers, capped at WARNING
QUIET_LOGGERS = ("protean", "botocore", "stripe", "asyncio")


def _environment() -> str:
    return (os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", LEVELS.get(_environment(), "INFO"))


def _handlers(level: str) -> list[logging.Handler]:
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    logfile = logging.handlers.RotatingFileHandler(
        log_dir / "storefront.log", maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
    )
    for handler in (console, logfile):
        handler.setLevel(level)
    return [console, logfile]


def configure_logging() -> None:
    """Route stdlib and structlog output through the same handlers."""
    level = get_log_level()

    logging.basicConfig(level=level, format="%(message)s", handlers=_handlers(level), force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    renderer = (
        structlog.processors.JSONRenderer()
        if _environment() == "production"
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def add_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
