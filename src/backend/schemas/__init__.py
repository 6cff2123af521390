"""Schemas module initialization."""

from schemas.auth import TokenResponse
from schemas.stats import StoryStatsResponse
from schemas.story import AuthorSummary, Story, StoryCreate, StoryListResponse, StorySortEnum
from schemas.user import FederatedProfile, UserCreate, UserLogin, UserResponse
from schemas.vote import VoteAction, VoteResult, VoteStatus

__all__ = [
    "AuthorSummary",
    "Story",
    "StoryCreate",
    "StoryListResponse",
    "StorySortEnum",
    "StoryStatsResponse",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "FederatedProfile",
    "VoteAction",
    "VoteResult",
    "VoteStatus",
    "TokenResponse",
]
