"""
Shared pytest fixtures and configuration for all tests.
"""

import os
import uuid
from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio

from trackly.auth.adapters.base import Principal
from trackly.auth.context import AuthContext
from trackly.config import settings

TEST_JWT_SECRET = "test-secret-key-for-trackly-tests-only"


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def test_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Sign tokens with a fixed secret and keep bcrypt cheap."""
    monkeypatch.setattr(settings, "jwt_secret", TEST_JWT_SECRET)
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'trackly.db'}"


@pytest_asyncio.fixture
async def database(sqlite_url: str) -> AsyncGenerator[str, None]:
    """Point the shared connection pool at a fresh SQLite database with all tables."""
    from trackly.database.connection import get_async_engine, init_database, reset_database
    from trackly.dbmodels import Base

    reset_database()
    init_database(sqlite_url, force_reinit=True)
    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield sqlite_url

    await engine.dispose()
    reset_database()


@pytest_asyncio.fixture
async def db_session(database: str) -> AsyncGenerator[Any, None]:
    """Provide a session from the shared pool; committed when the test finishes."""
    from trackly.database.connection import get_async_session

    async with get_async_session() as session:
        yield session


def make_auth_context(user_id: uuid.UUID | None) -> AuthContext:
    """Build the context the GraphQL context getter produces for a verified token."""
    if user_id is None:
        return AuthContext.anonymous()
    return AuthContext(
        user_id=user_id,
        principal=Principal(provider="jwt", subject=str(user_id)),
        token="test-token",
    )


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "requires_db: mark test as requiring database connection")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")


@pytest.fixture
def auth_context_for():
    """Factory fixture: ``auth_context_for(user_id)`` returns an AuthContext."""
    return make_auth_context


@pytest.fixture
def count_rows(database):
    """Count rows of a model, optionally filtered, in a short-lived session."""
    from sqlalchemy import func, select

    from trackly.database.connection import get_async_session

    async def run(model, *criteria) -> int:
        stmt = select(func.count()).select_from(model)
        if criteria:
            stmt = stmt.where(*criteria)
        async with get_async_session() as session:
            result = await session.execute(stmt)
            return result.scalar_one()

    return run
