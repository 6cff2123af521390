"""
Shared dependencies for API endpoints.

Includes:
- User JWT authentication (bearer token, ``sub`` = user id)
- Service factories bound to the request's database session
"""

from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from core.security import decode_token
from db.session import get_db
from repositories.user_repository import UserRepository
from schemas.converters import user_model_to_schema
from schemas.user import UserResponse
from services.identity_service import IdentityService
from services.stats_service import StatsService
from services.story_service import StoryService
from services.vote_service import VoteService

logger = structlog.get_logger(__name__)

# Security scheme
security = HTTPBearer()


# =============================================================================
# User Authentication (JWT-based)
# =============================================================================


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """
    Extract and validate the current user from the JWT token.

    Raises:
        HTTPException: If token is invalid or the user no longer exists.
    """
    payload = decode_token(credentials.credentials)
    if payload is None:
        raise _unauthorized("Invalid or expired token")

    user_id = payload.get("sub")
    if user_id is None:
        raise _unauthorized("Invalid token payload")

    user = await UserRepository(db).get_by_id(user_id)
    if not user:
        logger.warning("token_for_unknown_user", user_id=user_id)
        raise _unauthorized("User not found")

    return user_model_to_schema(user)


# =============================================================================
# Services
# =============================================================================


def get_story_service(db: AsyncSession = Depends(get_db)) -> StoryService:
    return StoryService(db)


def get_vote_service(db: AsyncSession = Depends(get_db)) -> VoteService:
    return VoteService(db)


def get_stats_service(db: AsyncSession = Depends(get_db)) -> StatsService:
    return StatsService(db)


def get_identity_service(db: AsyncSession = Depends(get_db)) -> IdentityService:
    return IdentityService(db)
