"""Factory for the configured auth adapter."""

from __future__ import annotations

from ..config import settings
from .adapters.base import AuthAdapter
from .adapters.jwt import JWTAuthAdapter


def get_auth_adapter() -> AuthAdapter:
    """Create the JWT adapter from settings.

    Raises:
        ValueError: If no signing secret is configured.
    """
    if not settings.jwt_secret:
        raise ValueError("JWT secret key is required. Set TRACKLY_JWT_SECRET.")

    return JWTAuthAdapter(
        secret_key=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        token_expiry_hours=settings.token_expiry_hours,
    )
