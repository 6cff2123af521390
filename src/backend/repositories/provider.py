"""
Repository protocols.

Services type their collaborators against these protocols rather than the
concrete SQLAlchemy repositories, so tests can hand in doubles.
"""

from datetime import datetime
from typing import Iterable, Optional, Protocol, runtime_checkable


@runtime_checkable
class UserRepositoryProtocol(Protocol):
    """Protocol defining user repository operations."""

    async def get_by_id(self, user_id: str): ...
    async def get_many(self, user_ids: Iterable[str]) -> dict: ...
    async def get_by_email(self, email: str): ...
    async def get_by_provider(self, provider: str, provider_id: str): ...
    async def email_exists(self, email: str) -> bool: ...
    async def create(self, username: str, email: str, **kwargs): ...


@runtime_checkable
class StoryRepositoryProtocol(Protocol):
    """Protocol defining story repository operations."""

    async def get_by_id(self, story_id: str, for_update: bool = False): ...
    async def get_by_access_token(self, access_token: str): ...
    async def list_by_author(self, author_id: str) -> list: ...
    async def list_public(self, now: datetime, sort: str = ..., page: int = 1, per_page: int = 10) -> tuple: ...
    async def list_live_ids(self, now: datetime, expires_until: Optional[datetime] = None) -> list[str]: ...
    async def create(self, **kwargs): ...
    async def increment_votes(self, story_id: str) -> Optional[int]: ...
    async def decrement_votes(self, story_id: str) -> Optional[int]: ...


@runtime_checkable
class VoteRepositoryProtocol(Protocol):
    """Protocol defining vote ledger operations."""

    async def exists(self, story_id: str, user_id: str) -> bool: ...
    async def create(self, story_id: str, user_id: str): ...
    async def delete(self, story_id: str, user_id: str) -> bool: ...
