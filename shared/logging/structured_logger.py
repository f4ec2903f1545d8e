"""Structured logging for the booking API.

Every entry carries the service name and environment. Request handlers
bind a correlation ID into the context so it appears on all entries
emitted while the request is served. Records from uvicorn and asyncpg go
through the same renderer as the application's own events.
"""

import logging
import sys
from typing import Any, Dict, List

import structlog
from structlog.types import EventDict, Processor


SERVICE_CONTEXT: Dict[str, str] = {
    "service": "class-booking-api",
    "environment": "production",
}

# Library loggers re-rendered through structlog.
FOREIGN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "asyncpg")


def add_app_context(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp the service name and environment unless the caller set them.

    Args:
        logger: The logger instance
        method_name: The logging method name
        event_dict: The event dictionary

    Returns:
        Event dictionary with service context
    """
    for key, value in SERVICE_CONTEXT.items():
        event_dict.setdefault(key, value)
    return event_dict


def _drop_color_message(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    # uvicorn duplicates its message with ANSI codes under this key.
    event_dict.pop("color_message", None)
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    service_name: str = "class-booking-api",
    environment: str = "production",
) -> None:
    """Route structlog and stdlib logging to stdout through one renderer.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: JSON lines when true, human-readable console output otherwise
        service_name: Value of the ``service`` key on every entry
        environment: Value of the ``environment`` key on every entry
    """
    SERVICE_CONTEXT["service"] = service_name
    SERVICE_CONTEXT["environment"] = environment

    shared_processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        _drop_color_message,
        add_app_context,
    ]

    if json_logs:
        renderer: Processor = structlog.processors.JSONRenderer()
        shared_processors.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level.upper())

    for name in FOREIGN_LOGGERS:
        foreign = logging.getLogger(name)
        foreign.handlers = []
        foreign.propagate = True


def bind_context(**kwargs: Any) -> None:
    """Bind key-value pairs to every entry logged from the current context.

    Args:
        **kwargs: Context key-value pairs to bind
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove keys bound with ``bind_context``.

    Args:
        *keys: Context keys to unbind
    """
    structlog.contextvars.unbind_contextvars(*keys)
