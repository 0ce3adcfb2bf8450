"""
Centralized logging configuration using structlog

Every event carries the current request id and, once the bearer token has been
verified, the requesting user's id. Values under credential-like keys are
redacted before rendering.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any

import structlog

# Context variables for request tracking
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_ctx: ContextVar[str | None] = ContextVar("user_id", default=None)

SENSITIVE_KEYS = frozenset(
    {
        "password",
        "password_hash",
        "token",
        "secret",
        "auth",
        "authorization",
        "access_token",
        "jwt",
        "session",
        "cookie",
        "credentials",
    }
)

REDACTED = "[REDACTED]"


def is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(sensitive in lowered for sensitive in SENSITIVE_KEYS)


def add_request_context(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    _ = logger, method_name
    request_id = request_id_ctx.get()
    user_id = user_id_ctx.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)
    if user_id:
        event_dict.setdefault("user_id", user_id)
    return event_dict


def redact_sensitive(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    _ = logger, method_name
    for key in list(event_dict):
        if key != "event" and is_sensitive(key):
            event_dict[key] = REDACTED
    return event_dict


def configure_logging(debug: bool = False, level: str | None = None) -> None:
    """Configure structlog on top of the standard library root logger.

    Debug mode renders colored console lines; otherwise one JSON object is
    written per event. ``level`` overrides the level implied by ``debug``.
    """
    log_level = logging.getLevelName(level.upper()) if level else (
        logging.DEBUG if debug else logging.INFO
    )
    logging.basicConfig(level=log_level, stream=sys.stdout, format="%(message)s", force=True)

    renderer: Any = (
        structlog.dev.ConsoleRenderer(colors=True) if debug else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_request_context,
            redact_sensitive,
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def set_request_context(request_id: str | None = None) -> str:
    """Start a request's logging context and return its id (a new uuid4 hex if none given)."""
    request_id = request_id or uuid.uuid4().hex
    request_id_ctx.set(request_id)
    user_id_ctx.set(None)
    return request_id


def bind_user_id(user_id: str | None) -> None:
    """Attach the authenticated user ID to the current request context."""
    user_id_ctx.set(user_id)


def clear_request_context() -> None:
    request_id_ctx.set(None)
    user_id_ctx.set(None)
