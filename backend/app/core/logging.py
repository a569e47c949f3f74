"""
Structured logging setup.

Every module grabs a logger with ``get_logger(__name__)`` and logs an event
name plus key/value context:

    logger.info("profile_saved", user_id=user_id, link_count=3)

LOG_FORMAT=json renders one JSON object per line (production, log shippers);
LOG_FORMAT=text renders a coloured console line (local development).
"""

import logging
import sys

import structlog

from app.core.config import settings

_configured = False


def setup_logging() -> None:
    """
    Configure structlog and the stdlib root logger.

    Safe to call more than once; only the first call does any work.
    """
    global _configured
    if _configured:
        return

    level = getattr(logging, settings.LOG_LEVEL)

    # stdlib loggers (uvicorn, sqlalchemy, alembic) share the same level/stream
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.LOG_FORMAT == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structured logger bound to ``name``."""
    return structlog.get_logger(name)
