"""
routed_server/core/logging.py
One log stream for application events and transport records.
"""

import logging
import sys
from typing import Optional
import structlog
from structlog.stdlib import BoundLogger, ProcessorFormatter

from .config import Settings

ROOT_LOGGER_NAME = "routed_server"


def _renderers(settings: Settings) -> list:
    if settings.LOG_FORMAT == "json":
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def setup_logging(settings: Settings) -> BoundLogger:
    """
    Route structlog events and plain ``logging`` records (uvicorn's) through
    a single stdout handler, rendered as JSON lines or console text.

    Calling it again replaces the handler installed by the previous call.

    Returns:
        The process-wide logger every component receives
    """
    enrich = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(ROOT_LOGGER_NAME)
    handler.setFormatter(
        ProcessorFormatter(
            foreign_pre_chain=enrich,
            processors=[ProcessorFormatter.remove_processors_meta, *_renderers(settings)],
        )
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == ROOT_LOGGER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(settings.LOG_LEVEL)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *enrich,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger(ROOT_LOGGER_NAME)
    logger.info(
        "logging_configured",
        level=settings.LOG_LEVEL,
        format=settings.LOG_FORMAT,
        environment=settings.ENVIRONMENT
    )
    return logger


def get_logger(name: Optional[str] = None) -> BoundLogger:
    """Child of the application logger, e.g. ``get_logger("main")``."""
    if name:
        return structlog.get_logger(f"{ROOT_LOGGER_NAME}.{name}")
    return structlog.get_logger(ROOT_LOGGER_NAME)


__all__ = ["setup_logging", "get_logger", "ROOT_LOGGER_NAME"]
