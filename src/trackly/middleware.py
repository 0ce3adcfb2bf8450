"""
Middleware for request context and logging
"""

import json
import re
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging import REDACTED, clear_request_context, get_logger, is_sensitive, set_request_context

logger = get_logger(__name__)

GRAPHQL_PATH = "/graphql"

# Never logged verbatim for /graphql: they may carry passwords or tokens
GRAPHQL_PAYLOAD_KEYS = ("query", "variables", "extensions")

_OPERATION_RE = re.compile(r"^\s*(query|mutation|subscription)\s+(\w+)")


def sanitize_query_params(params: dict[str, Any]) -> dict[str, Any]:
    """Copy of ``params`` with credential-like keys redacted."""
    return {key: REDACTED if is_sensitive(key) else value for key, value in params.items()}


def operation_name_from_query(query: Any) -> str | None:
    """Derive a loggable operation name from a GraphQL document.

    Named mutations are prefixed with ``mutation:``; anonymous documents are
    reported as ``unnamed_operation``.
    """
    if not isinstance(query, str) or not query:
        return None
    if "__schema" in query or "IntrospectionQuery" in query:
        return "__introspection"

    match = _OPERATION_RE.search(query)
    if not match:
        return "unnamed_operation"
    kind, name = match.groups()
    return f"mutation:{name}" if kind == "mutation" else name


async def _graphql_payload(request: Request) -> dict[str, Any] | None:
    if request.method == "GET":
        return dict(request.query_params)
    if request.method != "POST":
        return None

    body = await request.body()
    if not body:
        return None
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return data if isinstance(data, dict) else None


async def extract_graphql_operation_name(request: Request) -> str | None:
    if request.url.path != GRAPHQL_PATH:
        return None

    data = await _graphql_payload(request)
    if data is None:
        return None

    name = data.get("operationName")
    if isinstance(name, str) and name:
        return name
    return operation_name_from_query(data.get("query"))


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Bind a request id for the duration of each request and log its outcome."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # The user id is bound later, once the GraphQL context has verified the token
        request_id = set_request_context(request.headers.get("x-request-id"))

        try:
            params = sanitize_query_params(dict(request.query_params)) or None
            if params and request.url.path == GRAPHQL_PATH:
                params.update({key: REDACTED for key in GRAPHQL_PAYLOAD_KEYS if key in params})

            operation = await extract_graphql_operation_name(request)
            logger.info(
                "Request started",
                method=request.method,
                path=request.url.path,
                query_params=params,
                graphql_operation=operation,
                user_agent=request.headers.get("user-agent"),
                remote_addr=request.client.host if request.client else None,
            )

            response = await call_next(request)

            logger.info(
                "Request completed",
                status_code=response.status_code,
                method=request.method,
                path=request.url.path,
                graphql_operation=operation,
            )
            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            raise

        finally:
            clear_request_context()
