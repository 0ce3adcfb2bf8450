"""Resolve the bearer credential of a request into an AuthContext."""

from __future__ import annotations

from uuid import UUID

from ..logging import get_logger
from .adapters.base import AuthenticationError
from .context import AuthContext
from .factory import get_auth_adapter

logger = get_logger(__name__)


async def get_auth_context(authorization: str | None) -> AuthContext:
    """
    Extract authentication context from an Authorization header value.

    Returns an anonymous context when no header is present.

    Raises:
        AuthenticationError: If the header is malformed or the token is invalid.
    """
    if not authorization:
        return AuthContext.anonymous()

    if not authorization.startswith("Bearer "):
        logger.warning("Invalid authorization format received")
        raise AuthenticationError("Invalid authorization format. Expected: Bearer <token>")

    token = authorization[7:].strip()
    if not token:
        logger.warning("Empty token provided")
        raise AuthenticationError("Empty token")

    adapter = get_auth_adapter()
    principal = await adapter.verify_token(token)

    try:
        user_id = UUID(principal["subject"])
    except ValueError as e:
        logger.warning("Token subject is not a user id", subject=principal["subject"])
        raise AuthenticationError("Invalid token subject") from e

    return AuthContext(user_id=user_id, principal=principal, token=token)


async def get_auth_context_optional(authorization: str | None) -> AuthContext:
    """
    Optional authentication - returns an anonymous context if the token is
    missing or cannot be verified.

    Gated operations then fail with ``Unauthenticated`` instead of the
    request failing at the transport level.
    """
    try:
        return await get_auth_context(authorization)
    except AuthenticationError as e:
        logger.info("Treating request as anonymous", reason=str(e))
        return AuthContext.anonymous()
