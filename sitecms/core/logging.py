"""Structured logging configuration using structlog."""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from sitecms.config import Settings, settings

# Event keys whose values never reach the log output
SECRET_KEYS = frozenset({"authorization", "token", "access_token", "api_key", "password", "cookie"})
REDACTED = "[redacted]"


def redact_secrets(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    for key in event_dict.keys() & SECRET_KEYS:
        event_dict[key] = REDACTED
    return event_dict


def service_stamp(config: Settings) -> Processor:
    """Processor adding service, environment and commit to every event."""
    stamp = {"service": config.service_name, "env": config.environment, "commit": config.commit_sha}

    def add_service_info(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in stamp.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_service_info


def setup_logging(config: Settings = settings) -> None:
    """Configure structlog and the stdlib root logger.

    JSON lines when ``LOG_FORMAT=json``, coloured console output otherwise.
    The JSON form carries the same service/env/commit triple the health
    endpoint reports.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
    ]

    if config.log_format == "json":
        processors: list[Processor] = [
            *shared_processors,
            service_stamp(config),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, config.log_level),
        force=True,
    )

    # Outbound clients log every request at INFO
    for name in ("uvicorn.access", "httpx", "httpcore", "botocore", "boto3"):
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.DEBUG if config.database_echo else logging.WARNING
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind request-scoped values (request_id, path, client_ip) to every log line."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
