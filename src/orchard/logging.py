"""
Structured logging for orchard adapters.

Events are snake_case names with key/value context. Adapter loggers always
carry ``resource_type`` and ``resource`` so one cluster's lifecycle can be
followed across create, status and terminate calls.
"""

import logging
from typing import Any

import structlog

LOGGER_NAME = "orchard"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure structlog/standard logging bridge with JSON output."""

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, format="%(message)s")


def bind_context(
    resource_type: str, resource: str, **kwargs: Any
) -> structlog.stdlib.BoundLogger:
    """Logger bound to one resource adapter instance."""

    return structlog.get_logger(LOGGER_NAME).bind(
        resource_type=resource_type, resource=resource, **kwargs
    )
