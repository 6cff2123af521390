"""
User-related Pydantic schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    """Base user schema with common fields."""

    email: EmailStr
    username: str = Field(..., min_length=1, max_length=100)


class UserCreate(UserBase):
    """Schema for password registration."""

    password: str = Field(..., min_length=6, max_length=128)


class UserLogin(BaseModel):
    """Schema for password login."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class FederatedProfile(BaseModel):
    """Identity data handed over by a federated login provider."""

    provider: str
    provider_id: str
    email: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None


class UserResponse(BaseModel):
    """Schema for user responses (never includes credentials)."""

    id: str
    username: str
    email: str
    avatar_url: Optional[str] = None
    provider: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
