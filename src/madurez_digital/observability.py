"""Structured logging setup.

All modules log through structlog with keyword context:

    logger = get_logger(__name__)
    logger.info("Survey started", survey_id=str(survey_id))
"""

import logging

import structlog
from structlog.typing import FilteringBoundLogger, Processor

from madurez_digital.settings import Settings


def configure_logging(settings: Settings) -> None:
    """Configure structlog for the process.

    Args:
        settings: Service settings with log_level and log_json.
    """
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    renderer: Processor
    if settings.log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """Return a structlog logger whose events carry ``logger=name``."""
    return structlog.get_logger().bind(logger=name)
