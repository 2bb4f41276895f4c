"""structlog setup for the console core.

Log lines carry key/value context. ``log_context`` binds values (for
example the item being submitted) to every line logged inside the block.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.types import Processor

from pim_console.config import settings

QUIET_LOGGERS = ("httpx", "httpcore")


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderers(use_json: bool) -> list[Processor]:
    if use_json:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def setup_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: Log level name, defaults to ``settings.log_level``
        json_output: Force JSON (True) or console (False) output; by default
            JSON is used when enabled and not running in dev
    """
    level_name = (level or settings.log_level).upper()
    numeric_level = logging.getLevelName(level_name)
    if json_output is None:
        json_output = settings.log_json and settings.environment != "dev"

    structlog.configure(
        processors=[*_shared_processors(), *_renderers(json_output)],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Get a logger, optionally bound to ``initial_context``."""
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


@contextmanager
def log_context(**values: Any) -> Iterator[None]:
    """Bind ``values`` to every log line emitted inside the block."""
    with structlog.contextvars.bound_contextvars(**values):
        yield
