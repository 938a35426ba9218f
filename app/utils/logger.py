# app/utils/logger.py
"""
Centralised logging configuration for the entire application.
Logs to console and to a rotating JSON file in /logs/.

Loggers are structlog-wrapped stdlib loggers: pass identifiers as keyword
fields (logger.info("Added user", username=...)) and they land as separate
keys in logs/events.json.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

import structlog

from app.config import settings

DEFAULT_LEVEL = logging.DEBUG
LOG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")

_configured = False

# Applied to records from plain stdlib loggers (sqlalchemy, etc.) as well
_PRE_CHAIN = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
]


def parse_level(name):
    """
    Map a standard severity name (DEBUG, INFO, WARNING, ERROR, CRITICAL) to its
    numeric level. Returns None for anything else, including an empty value.
    """
    if not name:
        return None
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else None


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    level = parse_level(settings.LOG_LEVEL)
    fallback = level is None
    if fallback:
        level = DEFAULT_LEVEL

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_PRE_CHAIN,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Console handler
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_PRE_CHAIN,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
    ))

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(console)

    # Rotating JSON file handler — keeps last 10 × 5MB log files
    try:
        os.makedirs(LOG_DIR, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=os.path.join(LOG_DIR, "events.json"),
            maxBytes=5 * 1024 * 1024,
            backupCount=10,
            encoding="utf-8",
        )
    except OSError as e:
        root.error(f"Cannot open log file in {LOG_DIR}: {e}")
    else:
        file_handler.setLevel(level)
        file_handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_PRE_CHAIN,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
        ))
        root.addHandler(file_handler)

    if fallback:
        structlog.stdlib.get_logger(__name__).warning(
            "LOG_LEVEL is not a valid level name, defaulting to DEBUG",
            log_level=settings.LOG_LEVEL,
        )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a named logger. Call this at the top of every module."""
    _configure_root_logger()
    return structlog.stdlib.get_logger(name)
