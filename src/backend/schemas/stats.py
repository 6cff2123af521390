"""
Platform statistics schemas.
"""

from datetime import datetime

from pydantic import BaseModel


class StoryStatsResponse(BaseModel):
    """Point-in-time story counts."""

    total: int
    available: int
    expiring_within_day: int
    expiring_within_hour: int
    computed_at: datetime
    cache_ttl_minutes: int
    next_refresh_at: datetime

    model_config = {
        "json_schema_extra": {
            "example": {
                "total": 1520,
                "available": 312,
                "expiring_within_day": 41,
                "expiring_within_hour": 3,
                "computed_at": "2025-12-18T10:00:00Z",
                "cache_ttl_minutes": 5,
                "next_refresh_at": "2025-12-18T10:05:00Z",
            }
        }
    }
