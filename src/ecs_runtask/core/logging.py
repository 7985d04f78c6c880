"""
ecs-runtask logging - structlog configuration for CI and local runs.

Three output formats share one processor chain:

- **actions:** GitHub workflow commands. ``debug`` → ``::debug::``,
  ``warning`` → ``::warning::``, ``error`` → ``::error::``, ``info`` → a plain
  line. The runner hides ``::debug::`` lines unless step debug logging is on,
  which is where diagnostic payloads (submitted task definition, raw ECS
  responses) go.
- **console:** colored structlog console output for local runs.
- **json:** one JSON object per line with ECS-compatible field names.

Architecture:
    ::

        configure_logging(level="DEBUG", log_format="actions")
            │
            ▼
        merge_contextvars → add_log_level
            → [TimeStamper]* → set_exc_info → format_exc_info*
            → ActionsRenderer | ConsoleRenderer | JSONRenderer

        * console/json only

Examples:
    >>> configure_logging(level="DEBUG", log_format="actions")
    >>> logger = get_logger(__name__)
    >>> logger.info("task_running", url="https://console.aws.amazon.com/ecs/...")

Tags:
    logging, structlog, github-actions, workflow-commands, ecs-runtask
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from ecs_runtask.actions.commands import escape_data

LogFormat = Literal["actions", "console", "json"]

_SERVICE_NAME = "ecs-runtask"

_COMMAND_FOR_LEVEL = {
    "debug": "debug",
    "warning": "warning",
    "error": "error",
    "critical": "error",
    "exception": "error",
}


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _elasticsearch_compatible(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Make field names Elasticsearch/ECS compatible."""
    if "timestamp" in event_dict:
        event_dict["@timestamp"] = event_dict.pop("timestamp")
    if "level" in event_dict:
        event_dict["log.level"] = event_dict.pop("level")
    return event_dict


class ActionsRenderer:
    """Render an event dict as a GitHub workflow command line.

    The event becomes the message; remaining keys are appended as
    ``key=value``. Exceptions are appended to the message, so a traceback ends
    up escaped inside a single ``::error::`` or ``::debug::`` line.
    """

    _skip = frozenset({"event", "level", "logger", "exc_info", "exception", "stack"})

    def __init__(self, hidden: tuple[str, ...] = ()) -> None:
        self._hidden = self._skip | frozenset(hidden)

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        level = event_dict.get("level", method_name)
        message = str(event_dict.get("event", ""))

        extras = " ".join(
            f"{key}={value}" for key, value in event_dict.items() if key not in self._hidden
        )
        if extras:
            message = f"{message} {extras}"
        for key in ("exception", "stack"):
            if event_dict.get(key):
                message = f"{message}\n{event_dict[key]}"

        command = _COMMAND_FOR_LEVEL.get(level)
        if command is None:
            return message
        return f"::{command}::{escape_data(message)}"


def configure_logging(
    level: str = "INFO",
    log_format: LogFormat | None = None,
    service: str = "ecs-runtask",
) -> None:
    """Configure structured logging for the process.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_format: ``actions``, ``console`` or ``json``. None picks
            ``console`` on a tty and ``json`` otherwise.
        service: Service name included in JSON logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if log_format is None:
        log_format = "console" if sys.stdout.isatty() else "json"

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]

    renderer: Processor
    if log_format == "actions":
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = ActionsRenderer(hidden=("run_id",))
    elif log_format == "json":
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))
        shared_processors += [
            structlog.processors.format_exc_info,
            _add_service_metadata,
            _elasticsearch_compatible,
        ]
        renderer = structlog.processors.JSONRenderer()
    else:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        # PrintLogger binds sys.stdout on creation
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``)."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


class LogContext:
    """Context manager for scoped logging context.

    Example:
        with LogContext(run_id=config.run_id):
            logger.info("run_started")
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs

    def __enter__(self) -> LogContext:
        bind_context(**self._context)
        return self

    def __exit__(self, *args: Any) -> None:
        unbind_context(*self._context.keys())


__all__ = [
    "ActionsRenderer",
    "LogFormat",
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "LogContext",
]
