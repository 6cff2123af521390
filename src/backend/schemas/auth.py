"""
Session token schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field

from schemas.user import UserResponse


class TokenResponse(BaseModel):
    """Bearer token issued after registration or login."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: Optional[UserResponse] = None
