"""Repository modules for database access."""

from repositories.story_repository import StoryRepository
from repositories.user_repository import UserRepository
from repositories.vote_repository import VoteRepository

__all__ = [
    "StoryRepository",
    "VoteRepository",
    "UserRepository",
]
