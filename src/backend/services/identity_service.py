"""
Identity service.

Password registration/login and the federated-login capability. OAuth
handshakes happen outside the core; the provider profile is handed in once
the provider has vouched for it.
"""

from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import (
    EmailInUseError,
    InvalidCredentialsError,
    UnsupportedProviderError,
    ValidationError,
    translate_storage_errors,
)
from core.security import hash_password, verify_password
from models.user import User
from repositories.provider import UserRepositoryProtocol
from repositories.user_repository import UserRepository
from schemas.user import FederatedProfile

logger = structlog.get_logger(__name__)


class IdentityService:
    """Creates and authenticates users."""

    def __init__(
        self,
        db: AsyncSession,
        user_repo: Optional[UserRepositoryProtocol] = None,
        providers: Optional[list[str]] = None,
    ):
        self.db = db
        self.users = user_repo or UserRepository(db)
        self.providers = providers if providers is not None else settings.federated_providers_list

    @translate_storage_errors("get_user")
    async def get_user(self, user_id: str) -> Optional[User]:
        return await self.users.get_by_id(user_id)

    @translate_storage_errors("register_user")
    async def register(self, username: str, email: str, password: str) -> User:
        """Create a password account. The email must not be registered yet."""
        if await self.users.email_exists(email):
            raise EmailInUseError(email)

        try:
            async with self.db.begin_nested():
                user = await self.users.create(
                    username=username,
                    email=email,
                    hashed_password=hash_password(password),
                )
        except IntegrityError as exc:
            raise EmailInUseError(email) from exc

        logger.info("user_registered", user_id=str(user.id))
        return user

    @translate_storage_errors("authenticate_user")
    async def authenticate(self, email: str, password: str) -> User:
        """Check email and password; raises InvalidCredentialsError on mismatch."""
        user = await self.users.get_by_email(email)
        if user is None:
            raise InvalidCredentialsError()
        if not user.hashed_password:
            raise InvalidCredentialsError("This account uses social login")
        if not verify_password(password, user.hashed_password):
            logger.info("login_failed", user_id=str(user.id))
            raise InvalidCredentialsError()
        return user

    @translate_storage_errors("federated_login")
    async def find_or_create_federated_user(self, profile: FederatedProfile) -> User:
        """
        Resolve a federated identity to a user.

        Lookup order: the (provider, provider_id) pair, then an existing
        account with the same email, then a new password-less account.
        """
        provider = profile.provider.lower()
        if provider not in self.providers:
            raise UnsupportedProviderError(profile.provider)

        user = await self.users.get_by_provider(provider, profile.provider_id)
        if user is not None:
            return user

        if not profile.email:
            raise ValidationError(
                "Email is required",
                code="EMAIL_REQUIRED",
                details={"provider": provider},
            )

        user = await self.users.get_by_email(profile.email)
        if user is not None:
            return user

        user = await self.users.create(
            username=profile.username or profile.email.split("@")[0],
            email=profile.email,
            provider=provider,
            provider_id=profile.provider_id,
            avatar_url=profile.avatar_url,
        )
        logger.info("federated_user_created", user_id=str(user.id), provider=provider)
        return user
