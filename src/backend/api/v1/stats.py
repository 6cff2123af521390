"""
Story statistics API endpoint.

Counts are cached for ``STATS_CACHE_TTL_MINUTES`` to keep the database out of
every page load.
"""

from fastapi import APIRouter, Depends, Query

from api.deps import get_stats_service
from schemas.stats import StoryStatsResponse
from services.stats_service import StatsService

router = APIRouter()


@router.get("", response_model=StoryStatsResponse)
async def get_story_stats(
    refresh: bool = Query(False, description="Bypass the cache and recompute"),
    service: StatsService = Depends(get_stats_service),
) -> StoryStatsResponse:
    """
    Get story statistics.

    - total: every story ever created
    - available: public stories that have not expired
    - expiring_within_day / expiring_within_hour: available stories whose
      deadline falls inside the next day / hour
    """
    stats = await service.get_stats(force_refresh=refresh)
    return StoryStatsResponse(
        total=stats.total,
        available=stats.available,
        expiring_within_day=stats.expiring_within_day,
        expiring_within_hour=stats.expiring_within_hour,
        computed_at=stats.computed_at,
        cache_ttl_minutes=stats.cache_ttl_minutes,
        next_refresh_at=stats.next_refresh_at,
    )
