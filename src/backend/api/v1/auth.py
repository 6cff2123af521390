"""
Authentication endpoints for password accounts.

Federated logins reach the core through IdentityService once the provider
handshake has completed elsewhere; only password flows are exposed here.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, status

from api.deps import get_current_user, get_identity_service
from core.config import settings
from core.security import create_access_token
from models.user import User
from schemas.auth import TokenResponse
from schemas.converters import user_model_to_schema
from schemas.user import UserCreate, UserLogin, UserResponse
from services.identity_service import IdentityService

logger = structlog.get_logger(__name__)

router = APIRouter()


def _token_response(user: User) -> TokenResponse:
    token_data = {"sub": str(user.id), "email": user.email}
    return TokenResponse(
        access_token=create_access_token(token_data),
        token_type="bearer",
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=user_model_to_schema(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    identity: IdentityService = Depends(get_identity_service),
) -> TokenResponse:
    """Register a password account and start a session for it."""
    user = await identity.register(
        username=user_data.username,
        email=user_data.email,
        password=user_data.password,
    )
    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    identity: IdentityService = Depends(get_identity_service),
) -> TokenResponse:
    user = await identity.authenticate(credentials.email, credentials.password)
    logger.info("user_logged_in", user_id=str(user.id))
    return _token_response(user)


@router.get("/me", response_model=UserResponse)
async def me(current_user: Annotated[UserResponse, Depends(get_current_user)]) -> UserResponse:
    return current_user
