"""
Logging setup.

Library modules only call ``structlog.get_logger()``; applications call
``configure_logging`` once at startup to route events through stdlib
logging.
"""

import logging
import sys
from typing import Optional

import structlog

from .config import settings


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Log level name; defaults to ``settings.log_level``
        fmt: ``"json"`` or ``"plain"``; defaults to ``settings.log_format``
    """
    level = (level or settings.log_level).upper()
    fmt = (fmt or settings.log_format).lower()

    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level, logging.INFO),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
