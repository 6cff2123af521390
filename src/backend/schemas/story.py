"""
Story-related Pydantic schemas.

``StoryCreate`` carries the title/body bounds; the story service validates
incoming data through it before anything is persisted.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from core.lifetimes import DEFAULT_LIFETIME
from models.story import StoryVisibility

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100
CONTENT_MIN_LENGTH = 20
CONTENT_MAX_LENGTH = 5000


class StorySortEnum(str, Enum):
    """Ordering of the public story listing."""

    LATEST = "latest"
    POPULAR = "popular"


class StoryCreate(BaseModel):
    """Schema for creating a new story."""

    title: str = Field(..., min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    content: str = Field(..., min_length=CONTENT_MIN_LENGTH, max_length=CONTENT_MAX_LENGTH)
    lifetime: str = Field(
        DEFAULT_LIFETIME.value,
        description="One of 1h, 3h, 6h, 12h, 1d, 3d, 1w, 2w, 1m (unknown values mean 1w)",
    )


class AuthorSummary(BaseModel):
    """Public author details shown alongside a story."""

    id: str
    username: str
    avatar_url: Optional[str] = None


class Story(BaseModel):
    """Schema for story responses."""

    id: str
    title: str
    content: str
    author_id: str
    author: Optional[AuthorSummary] = None
    created_at: datetime
    expires_at: datetime
    votes: int = 0
    access_token: str
    visibility: StoryVisibility = StoryVisibility.PUBLIC
    is_public: bool = True
    is_expired: bool = False
    time_remaining_seconds: int = Field(0, description="Seconds remaining until the story expires")

    model_config = {"from_attributes": True}


class StoryListResponse(BaseModel):
    """Paginated list of stories."""

    stories: list[Story]
    total: int
    page: int
    per_page: int
    total_pages: int
