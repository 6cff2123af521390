"""
Vote ledger repository.

Rows are only ever inserted or deleted; the story counter is kept in step by
the vote service inside the same transaction.
"""

from typing import Any
from uuid import uuid4

from sqlalchemy import and_, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.ids import is_uuid
from models.vote import Vote


class VoteRepository:
    """Repository for vote ledger operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_rowcount(self, result: Any) -> int:
        """Safely get rowcount from result."""
        return getattr(result, "rowcount", 0) or 0

    async def exists(self, story_id: str, user_id: str) -> bool:
        """Check whether the user has voted on the story."""
        if not (is_uuid(story_id) and is_uuid(user_id)):
            return False
        result = await self.db.execute(
            select(func.count(Vote.id)).where(and_(Vote.story_id == story_id, Vote.user_id == user_id))
        )
        count = result.scalar() or 0
        return count > 0

    async def create(self, story_id: str, user_id: str) -> Vote:
        """
        Insert a ledger row.

        Raises IntegrityError when the pair already exists (unique constraint).
        """
        vote = Vote(
            id=str(uuid4()),
            story_id=story_id,
            user_id=user_id,
        )

        self.db.add(vote)
        await self.db.flush()

        return vote

    async def delete(self, story_id: str, user_id: str) -> bool:
        """Remove the ledger row for a pair; False if there was none."""
        if not (is_uuid(story_id) and is_uuid(user_id)):
            return False
        result = await self.db.execute(
            delete(Vote).where(and_(Vote.story_id == story_id, Vote.user_id == user_id))
        )
        return self._get_rowcount(result) > 0

    async def count_for_story(self, story_id: str) -> int:
        """Number of ledger rows for a story (authoritative vote count)."""
        if not is_uuid(story_id):
            return 0
        result = await self.db.execute(select(func.count(Vote.id)).where(Vote.story_id == story_id))
        return result.scalar() or 0
