"""JWT authentication adapter for self-issued session tokens.

Tokens are HS256 by default and carry the user id as ``sub`` plus the
user's email and name for display. They are not revocable; a token for a
deleted account simply stops resolving to a user.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import jwt
from jwt.exceptions import InvalidTokenError

from ...logging import get_logger
from .base import AuthenticationError, Principal

logger = get_logger(__name__)

REQUIRED_CLAIMS = ["exp", "iat", "sub"]


def principal_from_claims(claims: dict[str, Any]) -> Principal:
    principal = Principal(provider="jwt", subject=str(claims["sub"]), claims=claims)
    if email := claims.get("email"):
        principal["email"] = email
    if display_name := claims.get("name"):
        principal["display_name"] = display_name
    return principal


class JWTAuthAdapter:
    """Signs and verifies the bearer tokens returned by signup and login."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str = "trackly",
        audience: str = "trackly-api",
        token_expiry_hours: int = 24,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.token_lifetime = timedelta(hours=token_expiry_hours)

    async def verify_token(self, token: str) -> Principal:
        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                options={"require": REQUIRED_CLAIMS},
            )
        except InvalidTokenError as e:
            logger.warning("Rejected bearer token", reason=type(e).__name__)
            raise AuthenticationError("Invalid token") from e

        return principal_from_claims(claims)

    async def issue_token(self, user_id: UUID | None = None, claims: dict | None = None) -> str:
        """Sign a session token for ``user_id``; ``claims`` are merged in last."""
        issued_at = datetime.now(UTC)
        payload: dict[str, Any] = {
            "iss": self.issuer,
            "aud": self.audience,
            "iat": issued_at,
            "nbf": issued_at,
            "exp": issued_at + self.token_lifetime,
            "jti": uuid.uuid4().hex,
        }
        if user_id is not None:
            payload["sub"] = str(user_id)
        payload.update(claims or {})

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
