"""
Tests for vote repository.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

STORY_ID = "0f8e4a52-3c1b-4d7a-9a61-2b5c8e7f1d20"
USER_ID = "5b2d9c7e-8a14-4f3e-b6d0-91c3a7e4f852"


@pytest.fixture
def mock_session():
    """Create a mock database session."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.mark.unit
class TestVoteRepository:
    """Test VoteRepository operations."""

    def test_repository_instantiation(self, mock_session) -> None:
        from repositories.vote_repository import VoteRepository

        repo = VoteRepository(mock_session)
        assert repo.db == mock_session

    async def test_exists_returns_true(self, mock_session) -> None:
        from repositories.vote_repository import VoteRepository

        mock_result = MagicMock()
        mock_result.scalar = MagicMock(return_value=1)
        mock_session.execute = AsyncMock(return_value=mock_result)

        repo = VoteRepository(mock_session)
        assert await repo.exists(STORY_ID, USER_ID) is True

    async def test_exists_returns_false(self, mock_session) -> None:
        from repositories.vote_repository import VoteRepository

        mock_result = MagicMock()
        mock_result.scalar = MagicMock(return_value=0)
        mock_session.execute = AsyncMock(return_value=mock_result)

        repo = VoteRepository(mock_session)
        assert await repo.exists(STORY_ID, USER_ID) is False

    async def test_create_adds_and_flushes(self, mock_session) -> None:
        """Flushing surfaces the unique-constraint violation inside the savepoint."""
        from repositories.vote_repository import VoteRepository

        repo = VoteRepository(mock_session)
        vote = await repo.create("story-1", "user-1")

        mock_session.add.assert_called_once_with(vote)
        mock_session.flush.assert_awaited_once()
        assert vote.story_id == "story-1"
        assert vote.user_id == "user-1"

    async def test_delete_reports_removed_row(self, mock_session) -> None:
        from repositories.vote_repository import VoteRepository

        mock_session.execute = AsyncMock(return_value=MagicMock(rowcount=1))

        repo = VoteRepository(mock_session)
        assert await repo.delete(STORY_ID, USER_ID) is True

    async def test_delete_missing_row(self, mock_session) -> None:
        from repositories.vote_repository import VoteRepository

        mock_session.execute = AsyncMock(return_value=MagicMock(rowcount=0))

        repo = VoteRepository(mock_session)
        assert await repo.delete(STORY_ID, USER_ID) is False

    async def test_count_for_story(self, mock_session) -> None:
        from repositories.vote_repository import VoteRepository

        mock_result = MagicMock()
        mock_result.scalar = MagicMock(return_value=3)
        mock_session.execute = AsyncMock(return_value=mock_result)

        repo = VoteRepository(mock_session)
        assert await repo.count_for_story(STORY_ID) == 3

    @pytest.mark.parametrize("story_id", ["not-a-uuid", "../x"])
    async def test_malformed_story_id_skips_query(self, mock_session, story_id: str) -> None:
        from repositories.vote_repository import VoteRepository

        repo = VoteRepository(mock_session)

        assert await repo.exists(story_id, USER_ID) is False
        assert await repo.delete(story_id, USER_ID) is False
        assert await repo.count_for_story(story_id) == 0
        mock_session.execute.assert_not_awaited()
