import logging
import sys
from typing import Any

import structlog

from domain_config.core.config import settings

# Third-party loggers that are too chatty at INFO for request-level tracing
_QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "redis")


def setup_logging() -> None:
    """Route stdlib logging and structlog through one processor chain.

    Local development gets coloured console output; every other environment
    emits one JSON object per line, with non-ASCII kept readable so
    translated titles show up as written.
    """
    log_level = logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    processors: list[Any]
    if settings.ENVIRONMENT == "local":
        processors = [*shared_processors, structlog.dev.ConsoleRenderer(colors=True)]
    else:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
