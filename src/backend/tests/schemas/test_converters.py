"""
Tests for schema converters.
"""

from datetime import datetime, timedelta

import pytest

from schemas.converters import author_summary, story_model_to_schema, user_model_to_schema


@pytest.mark.unit
class TestStoryConverter:
    def test_live_story(self, story_factory, user_factory, now) -> None:
        story = story_factory(expires_at=now + timedelta(minutes=90))

        schema = story_model_to_schema(story, now, user_factory())

        assert schema.is_expired is False
        assert schema.is_public is True
        assert schema.time_remaining_seconds == 90 * 60
        assert schema.author.username == "storyteller"

    def test_naive_timestamps_are_treated_as_utc(self, story_factory, now) -> None:
        naive = datetime(2025, 6, 1, 11, 0)
        story = story_factory(expires_at=naive, created_at=naive - timedelta(hours=1))

        schema = story_model_to_schema(story, now)

        assert schema.expires_at.tzinfo is not None
        assert schema.is_expired is True
        assert schema.time_remaining_seconds == 0

    def test_unknown_author(self, story_factory, now) -> None:
        assert story_model_to_schema(story_factory(), now).author is None

    def test_unlisted_story_is_not_public(self, story_factory, now) -> None:
        schema = story_model_to_schema(story_factory(visibility="unlisted"), now)
        assert schema.is_public is False
        assert schema.visibility.value == "unlisted"

    def test_visibility_uses_model_enum(self, story_factory, now) -> None:
        from models.story import StoryVisibility

        schema = story_model_to_schema(story_factory(visibility="private"), now)
        assert schema.visibility is StoryVisibility.PRIVATE


@pytest.mark.unit
class TestUserConverter:
    def test_user_response_has_no_credentials(self, user_factory) -> None:
        data = user_model_to_schema(user_factory()).model_dump()
        assert "hashed_password" not in data
        assert data["id"] == "user-1"

    def test_author_summary_none(self) -> None:
        assert author_summary(None) is None
