"""
User model for PostgreSQL storage.

Identity record for story authors and voters. A user signs in either with a
password or through a federated provider; at least one of the two is set.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from sqlalchemy import DateTime, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base

if TYPE_CHECKING:
    from models.story import Story


class User(Base):
    """User account model."""

    __tablename__ = "users"

    __table_args__ = (
        # One account per federated identity
        UniqueConstraint("provider", "provider_id", name="uq_users_provider_identity"),
    )

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    username: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)

    # Credentials: bcrypt hash and/or federated identity
    hashed_password: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    provider: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    provider_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    avatar_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    stories: Mapped[list["Story"]] = relationship("Story", back_populates="author")

    @property
    def has_password(self) -> bool:
        return bool(self.hashed_password)

    @property
    def is_federated(self) -> bool:
        return bool(self.provider and self.provider_id)
