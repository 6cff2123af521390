"""Security utilities for authentication and story permalinks.

Covers JWT session tokens, password hashing and the opaque access tokens
used for shareable story links.
"""

import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from core.config import settings

# Token issuer and audience for validation
TOKEN_ISSUER = "storyvault-api"
TOKEN_AUDIENCE = "storyvault-client"

# URL-safe alphabet for story access tokens (64 symbols)
ACCESS_TOKEN_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "_-"


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token for an authenticated session."""
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update(
        {
            "exp": expire,
            "iat": now,
            "type": "access",
            "iss": TOKEN_ISSUER,
            "aud": TOKEN_AUDIENCE,
            "jti": secrets.token_urlsafe(16),
        }
    )
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, expected_type: str | None = "access") -> dict[str, Any] | None:
    """
    Decode and validate a JWT token.

    Returns:
        The decoded payload or None if invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            issuer=TOKEN_ISSUER,
            audience=TOKEN_AUDIENCE,
        )
    except JWTError:
        return None
    if expected_type and payload.get("type") != expected_type:
        return None
    return payload


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str | None) -> bool:
    """Check a password against a stored bcrypt hash."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def generate_access_token(length: int | None = None) -> str:
    """
    Generate an opaque, URL-safe identifier for a story permalink.

    The token is independent of the story's primary key. Uniqueness is
    probabilistic; the store regenerates on the rare insert collision.
    Defaults to ``STORY_ACCESS_TOKEN_LENGTH`` characters.
    """
    length = length or settings.STORY_ACCESS_TOKEN_LENGTH
    return "".join(secrets.choice(ACCESS_TOKEN_ALPHABET) for _ in range(length))
