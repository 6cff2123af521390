"""
Schema converter functions.

Centralized helpers for converting SQLAlchemy models to Pydantic schemas.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from core.clock import ensure_utc
from models.story import StoryVisibility
from schemas.story import AuthorSummary, Story
from schemas.user import UserResponse

if TYPE_CHECKING:
    from models.story import Story as StoryModel
    from models.user import User as UserModel


def author_summary(user: Optional["UserModel"]) -> Optional[AuthorSummary]:
    """Public author details, or None when the author is unknown."""
    if user is None:
        return None
    return AuthorSummary(id=str(user.id), username=user.username, avatar_url=user.avatar_url)


def story_model_to_schema(
    story: "StoryModel",
    now: datetime,
    author: Optional["UserModel"] = None,
) -> Story:
    """
    Convert a Story model to its response schema.

    Expiry-derived fields are evaluated against ``now`` so every record in a
    response agrees on the same instant.
    """
    return Story(
        id=str(story.id),
        title=story.title,
        content=story.content,
        author_id=str(story.author_id),
        author=author_summary(author),
        created_at=ensure_utc(story.created_at),
        expires_at=ensure_utc(story.expires_at),
        votes=story.votes or 0,
        access_token=story.access_token,
        visibility=StoryVisibility(story.visibility),
        is_public=story.is_public,
        is_expired=story.is_expired(now),
        time_remaining_seconds=story.time_remaining_seconds(now),
    )


def user_model_to_schema(user: "UserModel") -> UserResponse:
    """Convert a User model to its public response schema."""
    return UserResponse(
        id=str(user.id),
        username=user.username,
        email=user.email,
        avatar_url=user.avatar_url,
        provider=user.provider,
        created_at=user.created_at,
    )
