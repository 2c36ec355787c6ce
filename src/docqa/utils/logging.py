"""
Structured logging setup.

Modules log through structlog with key/value context:
    logger = structlog.get_logger(__name__)
    logger.info("document_processed", document_id=doc.id, chunks=12)

configure_logging() is called once by DocQA when a LoggingConfig is
given. Otherwise DocQA calls route_to_stdlib(), which sends events to
stdlib logging and leaves handlers and levels to the application.
"""

import logging

import structlog
from structlog.stdlib import LoggerFactory

from docqa.config import LoggingConfig


def configure_logging(config: LoggingConfig = None) -> None:
    """Route structlog through the standard library at the configured level."""
    config = config or LoggingConfig()

    logging.basicConfig(
        level=getattr(logging, config.level.upper(), logging.INFO),
        format="%(message)s",
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if config.json_output:
        # ConsoleRenderer formats tracebacks itself
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def route_to_stdlib() -> None:
    """
    Hand docqa's events to stdlib logging without installing any handlers.

    Used when the embedding application configures logging itself: events
    then reach whatever handlers and levels it set on the "docqa" loggers.
    An existing structlog configuration is left untouched.
    """
    if structlog.is_configured():
        return

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
