"""Structured logging for the API (structlog over stdlib logging).

- ``LOG_FORMAT=console``: colored key-value lines for local work
- ``LOG_FORMAT=json``: one JSON object per line for log shipping
- Every record carries the request id from asgi-correlation-id
- Library loggers (SQLAlchemy, httpx, uvicorn) share the same handler

Usage:
    from devevent.core.logging_config import setup_logging
    setup_logging()  # once, before create_app()
"""

import importlib.util
import logging
import sys
from typing import Any

import structlog
from asgi_correlation_id import correlation_id

from devevent.main_config import LoggingConfig, get_logging_config, get_settings

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def add_request_id(_logger: Any, _method_name: str, event_dict: dict) -> dict:
    """Copy the current X-Request-ID into the event."""
    request_id = correlation_id.get()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def add_environment(_logger: Any, _method_name: str, event_dict: dict) -> dict:
    event_dict.setdefault("env", get_settings().env.value)
    return event_dict


def _renderer(config: LoggingConfig) -> Any:
    if config.format == "json":
        return structlog.processors.JSONRenderer()
    # rich is a dev extra; plain output without it
    return structlog.dev.ConsoleRenderer(colors=importlib.util.find_spec("rich") is not None)


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure structlog and route stdlib loggers through it."""
    config = config or get_logging_config()
    level = config.level.upper()

    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_request_id,
        add_environment,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(config),
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.addHandler(handler)
        uvicorn_logger.propagate = False
        uvicorn_logger.setLevel(level)

    logging.getLogger("uvicorn.access").setLevel(config.level_uvicorn_access.upper())
    logging.getLogger("sqlalchemy.engine").setLevel(config.level_sqlalchemy.upper())
    logging.getLogger("httpx").setLevel(config.level_httpx.upper())

    structlog.get_logger(__name__).info("logging_configured", log_format=config.format, log_level=level)
