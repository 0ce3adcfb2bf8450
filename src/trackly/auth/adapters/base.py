"""Base authentication adapter interface and types."""

from __future__ import annotations

from typing import Literal, NotRequired, Protocol, TypedDict
from uuid import UUID


class Principal(TypedDict):
    """Identity extracted from an incoming token."""

    provider: Literal["jwt"]
    subject: str  # local user id
    email: NotRequired[str]
    display_name: NotRequired[str]
    claims: NotRequired[dict]


class AuthAdapter(Protocol):
    """Token issuing and verification interface."""

    async def verify_token(self, token: str) -> Principal:
        """
        Verify a token and return the principal identity.

        Raises:
            AuthenticationError: If token is invalid or expired
        """
        ...

    async def issue_token(self, user_id: UUID | None = None, claims: dict | None = None) -> str:
        """Issue a new signed token for ``user_id``."""
        ...


class AuthenticationError(Exception):
    """Raised when a token cannot be verified."""

    pass
