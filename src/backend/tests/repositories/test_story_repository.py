"""
Tests for story repository.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

STORY_ID = "0f8e4a52-3c1b-4d7a-9a61-2b5c8e7f1d20"


@pytest.fixture
def mock_session():
    """Create a mock database session."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    return session


def _sql(statement) -> str:
    return str(statement.compile(dialect=postgresql.dialect()))


@pytest.mark.unit
class TestStoryFilters:
    """The shared predicates used by listing, random picks and stats."""

    def test_live_filter_checks_visibility_and_expiry(self, now) -> None:
        from repositories.story_repository import live_filter

        sql = _sql(live_filter(now))
        assert "stories.visibility" in sql
        assert "stories.expires_at >" in sql

    def test_expiring_filter_strict_upper_bound(self, now) -> None:
        from repositories.story_repository import expiring_filter

        sql = _sql(expiring_filter(now, now + timedelta(hours=1)))
        assert "stories.expires_at <" in sql
        assert "stories.expires_at <=" not in sql

    def test_expiring_filter_inclusive_upper_bound(self, now) -> None:
        from repositories.story_repository import expiring_filter

        sql = _sql(expiring_filter(now, now + timedelta(hours=1), inclusive=True))
        assert "stories.expires_at <=" in sql


@pytest.mark.unit
class TestStoryRepository:
    """Test StoryRepository operations."""

    def test_repository_instantiation(self, mock_session) -> None:
        from repositories.story_repository import StoryRepository

        repo = StoryRepository(mock_session)
        assert repo.db == mock_session

    async def test_get_by_id_returns_story(self, mock_session) -> None:
        from repositories.story_repository import StoryRepository

        mock_story = MagicMock()
        mock_result = MagicMock()
        mock_result.scalar_one_or_none = MagicMock(return_value=mock_story)
        mock_session.execute = AsyncMock(return_value=mock_result)

        repo = StoryRepository(mock_session)
        result = await repo.get_by_id(STORY_ID)

        assert result == mock_story

    async def test_get_by_id_for_update_locks_row(self, mock_session) -> None:
        from repositories.story_repository import StoryRepository

        mock_result = MagicMock()
        mock_result.scalar_one_or_none = MagicMock(return_value=None)
        mock_session.execute = AsyncMock(return_value=mock_result)

        repo = StoryRepository(mock_session)
        await repo.get_by_id(STORY_ID, for_update=True)

        statement = mock_session.execute.call_args[0][0]
        assert "FOR UPDATE" in _sql(statement)

    async def test_list_public_returns_page_and_total(self, mock_session, now) -> None:
        from repositories.story_repository import StoryRepository

        count_result = MagicMock()
        count_result.scalar = MagicMock(return_value=12)
        stories = [MagicMock(), MagicMock()]
        page_result = MagicMock()
        page_result.scalars = MagicMock(return_value=MagicMock(all=MagicMock(return_value=stories)))
        mock_session.execute = AsyncMock(side_effect=[count_result, page_result])

        repo = StoryRepository(mock_session)
        result, total = await repo.list_public(now, sort="popular", page=2, per_page=5)

        assert result == stories
        assert total == 12
        page_sql = _sql(mock_session.execute.call_args_list[1][0][0])
        assert "ORDER BY stories.votes DESC, stories.created_at DESC, stories.id DESC" in page_sql

    async def test_list_public_latest_ordering(self, mock_session, now) -> None:
        from repositories.story_repository import StoryRepository

        count_result = MagicMock()
        count_result.scalar = MagicMock(return_value=0)
        page_result = MagicMock()
        page_result.scalars = MagicMock(return_value=MagicMock(all=MagicMock(return_value=[])))
        mock_session.execute = AsyncMock(side_effect=[count_result, page_result])

        repo = StoryRepository(mock_session)
        await repo.list_public(now, sort="latest")

        page_sql = _sql(mock_session.execute.call_args_list[1][0][0])
        assert "ORDER BY stories.created_at DESC, stories.id DESC" in page_sql

    async def test_list_live_ids_stringifies(self, mock_session, now) -> None:
        from repositories.story_repository import StoryRepository

        mock_result = MagicMock()
        mock_result.scalars = MagicMock(return_value=MagicMock(all=MagicMock(return_value=["a", "b"])))
        mock_session.execute = AsyncMock(return_value=mock_result)

        repo = StoryRepository(mock_session)
        assert await repo.list_live_ids(now) == ["a", "b"]

    async def test_create_adds_public_story_with_zero_votes(self, mock_session, now) -> None:
        from repositories.story_repository import StoryRepository

        repo = StoryRepository(mock_session)
        story = await repo.create(
            title="Title",
            content="Some content for the story",
            author_id="user-1",
            access_token="tok",
            created_at=now,
            expires_at=now + timedelta(hours=1),
        )

        mock_session.add.assert_called_once_with(story)
        mock_session.flush.assert_awaited_once()
        assert story.votes == 0
        assert story.visibility == "public"
        assert story.id

    async def test_increment_votes_returns_new_count(self, mock_session) -> None:
        from repositories.story_repository import StoryRepository

        mock_result = MagicMock()
        mock_result.scalar_one_or_none = MagicMock(return_value=4)
        mock_session.execute = AsyncMock(return_value=mock_result)

        repo = StoryRepository(mock_session)
        assert await repo.increment_votes(STORY_ID) == 4

    async def test_decrement_votes_never_negative(self, mock_session) -> None:
        from repositories.story_repository import StoryRepository

        mock_result = MagicMock()
        mock_result.scalar_one_or_none = MagicMock(return_value=0)
        mock_session.execute = AsyncMock(return_value=mock_result)

        repo = StoryRepository(mock_session)
        assert await repo.decrement_votes(STORY_ID) == 0
        assert "CASE WHEN" in _sql(mock_session.execute.call_args[0][0])

    async def test_count_live(self, mock_session, now) -> None:
        from repositories.story_repository import StoryRepository

        mock_result = MagicMock()
        mock_result.scalar = MagicMock(return_value=None)
        mock_session.execute = AsyncMock(return_value=mock_result)

        repo = StoryRepository(mock_session)
        assert await repo.count_live(now) == 0

    @pytest.mark.parametrize("story_id", ["not-a-uuid", "../x", ""])
    async def test_get_by_id_malformed_id_skips_query(self, mock_session, story_id: str) -> None:
        """Ids that are not UUIDs never reach the database."""
        from repositories.story_repository import StoryRepository

        repo = StoryRepository(mock_session)

        assert await repo.get_by_id(story_id) is None
        assert await repo.get_by_id(story_id, for_update=True) is None
        assert await repo.increment_votes(story_id) is None
        mock_session.execute.assert_not_awaited()
