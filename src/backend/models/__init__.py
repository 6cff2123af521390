"""Database models module."""

from models.user import User
from models.story import Story, StoryVisibility
from models.vote import Vote

__all__ = [
    "User",
    "Story",
    "StoryVisibility",
    "Vote",
]
