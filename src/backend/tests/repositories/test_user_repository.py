"""
Tests for user repository.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

ALICE_ID = "5b2d9c7e-8a14-4f3e-b6d0-91c3a7e4f852"
BOB_ID = "c41e7a93-2f6d-4b58-8e0a-7d3f19b6a2c4"


@pytest.fixture
def mock_session():
    """Create a mock database session."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.mark.unit
class TestUserRepository:
    """Test UserRepository operations."""

    async def test_get_many_empty_skips_query(self, mock_session) -> None:
        from repositories.user_repository import UserRepository

        repo = UserRepository(mock_session)
        assert await repo.get_many([]) == {}
        mock_session.execute.assert_not_awaited()

    async def test_get_many_keys_by_id(self, mock_session) -> None:
        from repositories.user_repository import UserRepository

        alice = MagicMock(id=ALICE_ID)
        bob = MagicMock(id=BOB_ID)
        mock_result = MagicMock()
        mock_result.scalars = MagicMock(return_value=MagicMock(all=MagicMock(return_value=[alice, bob])))
        mock_session.execute = AsyncMock(return_value=mock_result)

        repo = UserRepository(mock_session)
        users = await repo.get_many([ALICE_ID, BOB_ID, ALICE_ID])

        assert users == {ALICE_ID: alice, BOB_ID: bob}
        mock_session.execute.assert_awaited_once()

    async def test_email_exists(self, mock_session) -> None:
        from repositories.user_repository import UserRepository

        mock_result = MagicMock()
        mock_result.scalar = MagicMock(return_value=1)
        mock_session.execute = AsyncMock(return_value=mock_result)

        repo = UserRepository(mock_session)
        assert await repo.email_exists("Someone@Example.com") is True

    async def test_get_by_provider(self, mock_session) -> None:
        from repositories.user_repository import UserRepository

        mock_user = MagicMock()
        mock_result = MagicMock()
        mock_result.scalar_one_or_none = MagicMock(return_value=mock_user)
        mock_session.execute = AsyncMock(return_value=mock_result)

        repo = UserRepository(mock_session)
        assert await repo.get_by_provider("github", "42") == mock_user

    async def test_create_lowercases_email(self, mock_session) -> None:
        from repositories.user_repository import UserRepository

        repo = UserRepository(mock_session)
        user = await repo.create(username="teller", email="Teller@Example.COM", hashed_password="h")

        mock_session.add.assert_called_once_with(user)
        assert user.email == "teller@example.com"
        assert user.has_password is True
        assert user.is_federated is False

    @pytest.mark.parametrize("user_id", ["not-a-uuid", "../x"])
    async def test_get_by_id_malformed_id_skips_query(self, mock_session, user_id: str) -> None:
        from repositories.user_repository import UserRepository

        repo = UserRepository(mock_session)

        assert await repo.get_by_id(user_id) is None
        assert await repo.get_many([user_id]) == {}
        mock_session.execute.assert_not_awaited()
