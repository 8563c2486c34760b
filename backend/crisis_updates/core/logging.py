import logging
import sys
from typing import Optional

import structlog
from crisis_updates.core.config import Settings, settings as default_settings

def setup_logging(settings: Optional[Settings] = None):
    """
    Configure structured logging for the service.
    - JSON output in production for machine parsing
    - Console rendering in development
    - ISO timestamps and log level on every event
    """
    settings = settings or default_settings

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.ENVIRONMENT == "production":
        processors = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=settings.ENVIRONMENT == "production",
    )

    # Route standard logging (uvicorn, sqlalchemy) to stdout as well
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=settings.LOG_LEVEL.upper(),
    )
