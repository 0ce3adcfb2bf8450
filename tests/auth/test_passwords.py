"""Tests for bcrypt password hashing helpers."""

import pytest

from trackly.auth.passwords import hash_password, verify_password


class TestPasswords:
    @pytest.mark.asyncio
    async def test_hash_is_not_plaintext(self):
        hashed = await hash_password("correct horse")

        assert hashed != "correct horse"
        assert hashed.startswith("$2")

    @pytest.mark.asyncio
    async def test_hashes_are_salted(self):
        assert await hash_password("same password") != await hash_password("same password")

    @pytest.mark.asyncio
    async def test_verify_correct_password(self):
        hashed = await hash_password("correct horse")
        assert await verify_password("correct horse", hashed) is True

    @pytest.mark.asyncio
    async def test_verify_wrong_password(self):
        hashed = await hash_password("correct horse")
        assert await verify_password("battery staple", hashed) is False

    @pytest.mark.asyncio
    async def test_verify_without_stored_hash(self):
        """An unknown account never verifies."""
        assert await verify_password("anything", None) is False

    @pytest.mark.asyncio
    async def test_verify_malformed_hash(self):
        assert await verify_password("anything", "not-a-bcrypt-hash") is False
