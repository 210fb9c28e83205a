"""
Logging setup.

structlog on top of the stdlib ``logging`` module, so records emitted by
uvicorn and other libraries go through the same renderer.

Usage:
    from notekeeper.core.logging import get_logger, setup_logging

    setup_logging()                      # once, at application start
    logger = get_logger(__name__)
    logger.info("note_created", note_id=note.id)
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import Processor

from notekeeper.core import config


def setup_logging(level: str | None = None, format_type: str | None = None) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level name. Defaults to ``LOG_LEVEL``.
        format_type: ``json`` or ``console``. Defaults to ``LOG_FORMAT``.
    """
    effective_level = level if level is not None else config.log_level()
    effective_format = format_type if format_type is not None else config.log_format()

    log_level = getattr(logging, effective_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if effective_format == "console":
        renderer: Processor = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Return a structlog logger bound to ``name`` (usually ``__name__``)."""
    return structlog.get_logger(name)
