"""
Story statistics service with short-lived caching.

Counts are recomputed with the same predicates the story repository uses for
listing, so "available" here always matches what the public listing shows at
the moment of computation.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from core.clock import Clock, utc_now
from core.config import settings
from core.exceptions import translate_storage_errors
from repositories.story_repository import StoryRepository

logger = structlog.get_logger(__name__)


@dataclass
class StoryStats:
    """Point-in-time story counts."""

    total: int
    available: int
    expiring_within_day: int
    expiring_within_hour: int
    computed_at: datetime
    cache_ttl_minutes: int

    @property
    def next_refresh_at(self) -> datetime:
        return self.computed_at + timedelta(minutes=self.cache_ttl_minutes)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "total": self.total,
            "available": self.available,
            "expiring_within_day": self.expiring_within_day,
            "expiring_within_hour": self.expiring_within_hour,
            "computed_at": self.computed_at.isoformat(),
            "cache_ttl_minutes": self.cache_ttl_minutes,
        }

    def is_stale(self, now: datetime) -> bool:
        """Check if cached stats are stale and need recomputing."""
        return now >= self.next_refresh_at


class StatsService:
    """Service for computing and caching story statistics."""

    # In-memory cache shared by all instances in this process
    _cache: Optional[StoryStats] = None

    def __init__(
        self,
        db: AsyncSession,
        story_repo: Optional[StoryRepository] = None,
        clock: Clock = utc_now,
        cache_ttl_minutes: Optional[int] = None,
    ):
        """
        Initialize stats service.

        Args:
            db: Database session
            story_repo: Story repository, defaults to one bound to ``db``
            clock: Current-instant provider
            cache_ttl_minutes: How long to cache stats (default from settings)
        """
        self.db = db
        self.stories = story_repo or StoryRepository(db)
        self.clock = clock
        self.cache_ttl_minutes = (
            settings.STATS_CACHE_TTL_MINUTES if cache_ttl_minutes is None else cache_ttl_minutes
        )

    async def get_stats(self, force_refresh: bool = False) -> StoryStats:
        """
        Get story statistics, using the cache if it is still fresh.

        Args:
            force_refresh: If True, bypass cache and recompute stats
        """
        now = self.clock()
        cached = StatsService._cache
        if not force_refresh and cached is not None and not cached.is_stale(now):
            return cached

        stats = await self._compute_stats(now)
        StatsService._cache = stats
        return stats

    @translate_storage_errors("compute_stats")
    async def _compute_stats(self, now: datetime) -> StoryStats:
        """Compute fresh statistics from database."""
        stats = StoryStats(
            total=await self.stories.count_all(),
            available=await self.stories.count_live(now),
            expiring_within_day=await self.stories.count_expiring(now, now + timedelta(days=1)),
            expiring_within_hour=await self.stories.count_expiring(now, now + timedelta(hours=1)),
            computed_at=now,
            cache_ttl_minutes=self.cache_ttl_minutes,
        )
        logger.info("story_stats_computed", **stats.to_dict())
        return stats

    @classmethod
    def invalidate_cache(cls) -> None:
        """Drop cached stats."""
        cls._cache = None
