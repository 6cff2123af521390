"""
User repository for database operations.
"""

from typing import Iterable, Optional
from uuid import uuid4

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.ids import is_uuid
from models.user import User


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by ID."""
        if not is_uuid(user_id):
            return None
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_many(self, user_ids: Iterable[str]) -> dict[str, User]:
        """Fetch several users in one query, keyed by ID."""
        ids = {str(user_id) for user_id in user_ids if is_uuid(user_id)}
        if not ids:
            return {}
        result = await self.db.execute(select(User).where(User.id.in_(ids)))
        return {str(user.id): user for user in result.scalars().all()}

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email."""
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def get_by_provider(self, provider: str, provider_id: str) -> Optional[User]:
        """Get a user by federated identity."""
        result = await self.db.execute(
            select(User).where(and_(User.provider == provider, User.provider_id == provider_id))
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Check if email is already registered."""
        result = await self.db.execute(select(func.count(User.id)).where(User.email == email.lower()))
        count = result.scalar() or 0
        return count > 0

    async def create(
        self,
        username: str,
        email: str,
        hashed_password: Optional[str] = None,
        provider: Optional[str] = None,
        provider_id: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> User:
        """Create a new user."""
        user = User(
            id=str(uuid4()),
            username=username,
            email=email.lower(),
            hashed_password=hashed_password,
            provider=provider,
            provider_id=provider_id,
            avatar_url=avatar_url,
        )

        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)

        return user
