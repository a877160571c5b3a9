"""
Structured logging configuration using structlog.

JSON logs in production, colored console logs elsewhere. Every event
carries the configured ``service`` name and, inside an API request, the
``request_id`` bound by the request middleware. The pure core modules
(ranker, clusterer, aggregator) log through the standard library and share
the same stdout stream and level.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from news_analytics.config.settings import get_settings

# Third-party loggers that are chatty at INFO
_QUIET_LOGGERS = ("httpx", "httpcore", "asyncio", "uvicorn.access")


def _add_service_name(service_name: str) -> Processor:
    def add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service


def setup_logging() -> None:
    """
    Configure structured logging for the application.

    Level comes from LOG_LEVEL, or DEBUG when DEBUG=true.

    Usage:
        setup_logging()
        logger = structlog.get_logger(__name__)
        logger.info("Topics built", documents=12, topics=3)
    """
    settings = get_settings()
    level = "DEBUG" if settings.debug else settings.log_level

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service_name(settings.service_name),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if settings.is_production:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    logging.getLogger().setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_context(**kwargs) -> None:
    """
    Bind context variables to all subsequent log messages.

    Args:
        **kwargs: Key-value pairs to bind (e.g. request_id)
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
