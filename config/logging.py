"""
Logging setup for the rebalancer.

Balancing events are emitted through structlog. Outside debug mode they are
rendered as JSON lines; with ``DEBUG`` on they are rendered for a terminal.

Usage:
    from config.logging import configure_logging

    configure_logging()                 # level and mode from settings
    configure_logging(debug=True)       # colored console, rebalancer at DEBUG
"""

import logging.config
import sys
from typing import Any

import structlog

from config import settings


def _foreign_pre_chain() -> list[Any]:
    """Processors applied to records from plain stdlib loggers such as cvxpy's."""
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def configure_structlog(debug: bool = False) -> None:
    """
    Install the structlog processor chain used by every rebalancer logger.

    Args:
        debug: Render events for a terminal instead of as JSON lines.
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        # Solver failures carry tracebacks; keep them inside the JSON event
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logging_config(debug: bool = False, level: str = "INFO") -> dict[str, Any]:
    """
    Build the ``logging.config.dictConfig`` mapping for stdout output.

    Args:
        debug: Use the console formatter and log the rebalancer at DEBUG.
        level: Level of the ``rebalancer`` logger outside debug mode.

    Returns:
        Mapping with one stdout handler shared by the root, ``rebalancer``
        and ``cvxpy`` loggers.
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processor": structlog.processors.JSONRenderer(),
                "foreign_pre_chain": _foreign_pre_chain(),
            },
            "console": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processor": structlog.dev.ConsoleRenderer(colors=True),
                "foreign_pre_chain": _foreign_pre_chain(),
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "console" if debug else "json",
                "stream": sys.stdout,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": "WARNING",
        },
        "loggers": {
            "rebalancer": {
                "handlers": ["console"],
                "level": "DEBUG" if debug else level,
                "propagate": False,
            },
            # Solver progress output is noisy below WARNING
            "cvxpy": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
        },
    }


def configure_logging(debug: bool | None = None, level: str | None = None) -> None:
    """Apply structlog and stdlib logging configuration from settings."""

    debug = settings.DEBUG if debug is None else debug
    configure_structlog(debug=debug)
    logging.config.dictConfig(get_logging_config(debug=debug, level=level or settings.LOG_LEVEL))
