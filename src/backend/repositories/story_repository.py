"""
Story repository for database operations.

The public-visibility and expiry predicates are defined once at module level
so listing, random selection and statistics all filter the same way.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import ColumnElement, and_, case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db.ids import is_uuid
from models.story import Story, StoryVisibility

SORT_LATEST = "latest"
SORT_POPULAR = "popular"


def public_filter() -> ColumnElement[bool]:
    """Stories visible to everyone."""
    return Story.visibility == StoryVisibility.PUBLIC.value


def live_filter(now: datetime) -> ColumnElement[bool]:
    """Public stories that have not expired at ``now``."""
    return and_(public_filter(), Story.expires_at > now)


def expiring_filter(now: datetime, until: datetime, inclusive: bool = False) -> ColumnElement[bool]:
    """Live public stories whose deadline falls before ``until``."""
    upper = Story.expires_at <= until if inclusive else Story.expires_at < until
    return and_(live_filter(now), upper)


def _ordering(sort: str) -> tuple[Any, ...]:
    # Secondary keys keep pagination deterministic across pages
    if sort == SORT_POPULAR:
        return (Story.votes.desc(), Story.created_at.desc(), Story.id.desc())
    return (Story.created_at.desc(), Story.id.desc())


class StoryRepository:
    """Repository for story database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, story_id: str, for_update: bool = False) -> Optional[Story]:
        """Get a story by ID, optionally locking the row for the transaction."""
        if not is_uuid(story_id):
            return None
        query = select(Story).where(Story.id == story_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_access_token(self, access_token: str) -> Optional[Story]:
        """Get a story by its permalink token, expired or not."""
        result = await self.db.execute(select(Story).where(Story.access_token == access_token))
        return result.scalar_one_or_none()

    async def list_by_author(self, author_id: str) -> list[Story]:
        """All stories of an author, newest first, regardless of expiry."""
        if not is_uuid(author_id):
            return []
        result = await self.db.execute(
            select(Story).where(Story.author_id == author_id).order_by(Story.created_at.desc(), Story.id.desc())
        )
        return list(result.scalars().all())

    async def list_public(
        self,
        now: datetime,
        sort: str = SORT_LATEST,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[list[Story], int]:
        """List live public stories with pagination."""
        condition = live_filter(now)

        # Get total count
        total_result = await self.db.execute(select(func.count(Story.id)).where(condition))
        total = total_result.scalar() or 0

        # Get paginated results
        query = (
            select(Story)
            .where(condition)
            .order_by(*_ordering(sort))
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        result = await self.db.execute(query)
        stories = list(result.scalars().all())

        return stories, total

    async def list_live_ids(self, now: datetime, expires_until: Optional[datetime] = None) -> list[str]:
        """
        IDs of live public stories, optionally only those expiring by ``expires_until``.

        The upper bound is inclusive.
        """
        condition = live_filter(now) if expires_until is None else expiring_filter(now, expires_until, inclusive=True)
        result = await self.db.execute(select(Story.id).where(condition).order_by(Story.id))
        return [str(story_id) for story_id in result.scalars().all()]

    async def create(
        self,
        title: str,
        content: str,
        author_id: str,
        access_token: str,
        created_at: datetime,
        expires_at: datetime,
        visibility: StoryVisibility = StoryVisibility.PUBLIC,
    ) -> Story:
        """Insert a story. Raises IntegrityError if the access token is taken."""
        story = Story(
            id=str(uuid4()),
            title=title,
            content=content,
            author_id=author_id,
            access_token=access_token,
            created_at=created_at,
            expires_at=expires_at,
            votes=0,
            visibility=visibility.value,
        )

        self.db.add(story)
        await self.db.flush()
        await self.db.refresh(story)

        return story

    async def increment_votes(self, story_id: str) -> Optional[int]:
        """Atomically add one vote; returns the new count or None if missing."""
        if not is_uuid(story_id):
            return None
        result = await self.db.execute(
            update(Story).where(Story.id == story_id).values(votes=Story.votes + 1).returning(Story.votes)
        )
        return result.scalar_one_or_none()

    async def decrement_votes(self, story_id: str) -> Optional[int]:
        """Atomically remove one vote, never going below zero."""
        if not is_uuid(story_id):
            return None
        result = await self.db.execute(
            update(Story)
            .where(Story.id == story_id)
            .values(votes=case((Story.votes > 0, Story.votes - 1), else_=0))
            .returning(Story.votes)
        )
        return result.scalar_one_or_none()

    # ========================================================================
    # Counting (statistics)
    # ========================================================================

    async def count_all(self) -> int:
        """Every story ever created."""
        result = await self.db.execute(select(func.count(Story.id)))
        return result.scalar() or 0

    async def count_live(self, now: datetime) -> int:
        result = await self.db.execute(select(func.count(Story.id)).where(live_filter(now)))
        return result.scalar() or 0

    async def count_expiring(self, now: datetime, until: datetime) -> int:
        """Live public stories with ``now < expires_at < until``."""
        result = await self.db.execute(select(func.count(Story.id)).where(expiring_filter(now, until)))
        return result.scalar() or 0
