"""structlog setup for serverstats.

Everything is written to stderr: stdout is reserved for the report itself.
"""

import logging
import sys

import structlog

from serverstats.config import ServerStatsSettings, settings


def _level_number(name: str) -> int:
    """Numeric level for a name such as ``debug``; unknown names mean WARNING."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.WARNING


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging(config: ServerStatsSettings = settings) -> None:
    """Configure structlog from the log_level and log_format settings."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            structlog.processors.format_exc_info,
            _renderer(config.log_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(config.log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, optionally bound to a component name."""
    # Initial values stay lazy until the first log call
    if name:
        return structlog.get_logger(component=name)
    return structlog.get_logger()
