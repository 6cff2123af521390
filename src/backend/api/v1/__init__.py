"""
API v1 router aggregating all endpoints.
"""

from fastapi import APIRouter

from api.v1.auth import router as auth_router
from api.v1.stats import router as stats_router
from api.v1.stories import router as stories_router

router = APIRouter()

router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
router.include_router(stories_router, prefix="/stories", tags=["Stories"])
router.include_router(stats_router, prefix="/stats", tags=["Story Statistics"])
