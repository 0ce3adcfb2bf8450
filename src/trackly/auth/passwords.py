"""Password hashing with bcrypt.

Hashing is CPU bound, so both helpers run bcrypt in a worker thread to keep
the event loop responsive.
"""

from __future__ import annotations

import asyncio
from functools import lru_cache

import bcrypt

from ..config import settings


def _hash(password: str, rounds: int) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def _check(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("ascii"))
    except ValueError:
        # Malformed stored hash or over-long password
        return False


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> str:
    return _hash("not-a-real-password", rounds)


async def hash_password(password: str) -> str:
    return await asyncio.to_thread(_hash, password, settings.bcrypt_rounds)


async def verify_password(password: str, hashed: str | None) -> bool:
    """Check ``password`` against ``hashed``.

    When there is no stored hash (unknown user) a dummy hash is checked
    instead so the response time does not reveal whether the account exists.
    """
    if hashed is None:
        dummy = await asyncio.to_thread(_dummy_hash, settings.bcrypt_rounds)
        await asyncio.to_thread(_check, password, dummy)
        return False
    return await asyncio.to_thread(_check, password, hashed)
