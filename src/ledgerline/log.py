"""Structured logging setup.

Loggers are structlog loggers on top of the stdlib ``logging`` module, so
levels are controlled per stdlib logger name. Everything under the
``ledgerline`` namespace is silent below WARNING until ``configure_logging``
is called (the CLI does this from ``--log-level``).
"""

import logging
import sys

import structlog

LOGGER_NAME = "ledgerline"
LOG_LEVEL_ENV = "LEDGERLINE_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


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
        structlog.processors.KeyValueRenderer(
            key_order=["timestamp", "level", "logger", "event"], drop_missing=True
        ),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class _StderrHandler(logging.StreamHandler):
    """Stream handler that always writes to the current ``sys.stderr``."""

    def __init__(self, level=logging.NOTSET):
        logging.Handler.__init__(self, level)

    @property
    def stream(self):
        return sys.stderr


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Route ledgerline log events to stderr at the given level.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Raises:
        ValueError: If level is not a known level name
    """
    level_name = level.upper()
    if level_name not in LOG_LEVELS:
        raise ValueError(f"Invalid log level '{level}'. Must be one of: {', '.join(LOG_LEVELS)}")

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, _StderrHandler):
            logger.removeHandler(handler)
    handler = _StderrHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level_name)
    logger.propagate = False


def get_logger(name: str):
    """Return a structlog logger bound to a stdlib logger name."""
    return structlog.get_logger(name)
