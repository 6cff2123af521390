"""
Pytest fixtures for StoryVault backend tests.
"""

import os
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing app
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing")
os.environ.setdefault("POSTGRES_PASSWORD", "test-password")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_DB", "storyvault_test")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "false")

FROZEN_NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
async def app() -> Any:
    """Create FastAPI application for testing."""
    from main import app as fastapi_app

    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def client(app: Any) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Create mock database session.

    ``begin_nested()`` returns an async context manager that lets exceptions
    propagate, like a real savepoint.
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    session.begin_nested = MagicMock(return_value=MagicMock())
    return session


@pytest.fixture
def now() -> datetime:
    return FROZEN_NOW


@pytest.fixture
def clock(now: datetime):
    """Clock frozen at ``now``."""
    return lambda: now


@pytest.fixture(autouse=True)
def reset_stats_cache():
    """Stats are cached at class level; isolate tests from each other."""
    from services.stats_service import StatsService

    StatsService.invalidate_cache()
    yield
    StatsService.invalidate_cache()


def make_user(
    user_id: str = "user-1",
    username: str = "storyteller",
    email: str = "teller@example.com",
    hashed_password: Optional[str] = "hashed",
    provider: Optional[str] = None,
) -> MagicMock:
    user = MagicMock()
    user.id = user_id
    user.username = username
    user.email = email
    user.hashed_password = hashed_password
    user.provider = provider
    user.provider_id = None
    user.avatar_url = None
    user.created_at = FROZEN_NOW - timedelta(days=30)
    return user


def make_story(
    story_id: str = "story-1",
    author_id: str = "user-1",
    votes: int = 0,
    created_at: datetime = FROZEN_NOW - timedelta(hours=1),
    expires_at: datetime = FROZEN_NOW + timedelta(days=1),
    visibility: str = "public",
    access_token: str = "AbCdEfGh12",
):
    """Build a real (unsaved) Story model instance."""
    from models.story import Story

    return Story(
        id=story_id,
        title="A short title",
        content="Once upon a time there was a story.",
        author_id=author_id,
        votes=votes,
        access_token=access_token,
        visibility=visibility,
        created_at=created_at,
        expires_at=expires_at,
    )


@pytest.fixture
def user_factory():
    return make_user


@pytest.fixture
def story_factory():
    return make_story


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Valid bearer token for ``user-1``."""
    from core.security import create_access_token

    token = create_access_token({"sub": "user-1", "email": "teller@example.com"})
    return {"Authorization": f"Bearer {token}"}
