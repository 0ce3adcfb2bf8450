"""Tests for resolving Authorization headers into an AuthContext."""

from uuid import uuid4

import pytest

from trackly.auth import AuthenticationError, get_auth_adapter
from trackly.auth.middleware import get_auth_context, get_auth_context_optional
from trackly.config import settings


class TestGetAuthContext:
    @pytest.mark.asyncio
    async def test_no_header_is_anonymous(self):
        context = await get_auth_context(None)

        assert context.user_id is None
        assert context.is_authenticated is False

    @pytest.mark.asyncio
    async def test_valid_bearer_token(self):
        user_id = uuid4()
        token = await get_auth_adapter().issue_token(user_id)

        context = await get_auth_context(f"Bearer {token}")

        assert context.user_id == user_id
        assert context.token == token
        assert context.is_authenticated is True

    @pytest.mark.asyncio
    async def test_wrong_scheme(self):
        with pytest.raises(AuthenticationError, match="Invalid authorization format"):
            await get_auth_context("Basic dXNlcjpwYXNz")

    @pytest.mark.asyncio
    async def test_empty_token(self):
        with pytest.raises(AuthenticationError, match="Empty token"):
            await get_auth_context("Bearer    ")

    @pytest.mark.asyncio
    async def test_subject_must_be_a_user_id(self):
        adapter = get_auth_adapter()
        token = await adapter.issue_token(claims={"sub": "not-a-uuid"})

        with pytest.raises(AuthenticationError, match="Invalid token subject"):
            await get_auth_context(f"Bearer {token}")


class TestGetAuthContextOptional:
    @pytest.mark.asyncio
    async def test_invalid_token_is_anonymous(self):
        context = await get_auth_context_optional("Bearer definitely-not-a-jwt")

        assert context.user_id is None
        assert context.is_authenticated is False

    @pytest.mark.asyncio
    async def test_valid_token_passes_through(self):
        user_id = uuid4()
        token = await get_auth_adapter().issue_token(user_id)

        context = await get_auth_context_optional(f"Bearer {token}")
        assert context.user_id == user_id


class TestAuthAdapterFactory:
    def test_missing_secret(self, monkeypatch):
        monkeypatch.setattr(settings, "jwt_secret", None)

        with pytest.raises(ValueError, match="JWT secret key is required"):
            get_auth_adapter()

    def test_uses_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "jwt_issuer", "custom-issuer")

        adapter = get_auth_adapter()
        assert adapter.issuer == "custom-issuer"
