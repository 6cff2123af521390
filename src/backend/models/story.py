"""
Story model for PostgreSQL storage.

A story's expiry instant is computed once at creation and never changes.
Expiry is not a stored state: a story is live while ``expires_at > now``.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.clock import ensure_utc, utc_now
from db.base import Base

if TYPE_CHECKING:
    from models.user import User


class StoryVisibility(str, Enum):
    """Who can discover a story through public queries."""

    PUBLIC = "public"  # Listed, random-pickable, votable until expiry
    UNLISTED = "unlisted"  # Reachable only through its access token
    PRIVATE = "private"  # Author only


class Story(Base):
    """
    Story model.

    Lifecycle:
    - Created public with a lifetime resolved into ``expires_at``
    - Never updated in place apart from the denormalised ``votes`` counter
    - After expiry it drops out of public queries but stays reachable by
      its author and by ``access_token``
    """

    __tablename__ = "stories"

    __table_args__ = (
        # Every public query filters on visibility + expires_at
        Index("ix_stories_visibility_expires_at", "visibility", "expires_at"),
    )

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    title: Mapped[str] = mapped_column(String(100))
    content: Mapped[str] = mapped_column(Text)

    author_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id"),
        index=True,
    )

    # Cache of count(votes where story_id = id), updated with the ledger
    votes: Mapped[int] = mapped_column(Integer, default=0, index=True)

    # Opaque permalink identifier, independent of the primary key
    access_token: Mapped[str] = mapped_column(String(32), unique=True, index=True)

    visibility: Mapped[str] = mapped_column(
        String(20),
        default=StoryVisibility.PUBLIC.value,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        index=True,
    )

    author: Mapped[Optional["User"]] = relationship("User", back_populates="stories")

    @property
    def is_public(self) -> bool:
        return self.visibility == StoryVisibility.PUBLIC.value

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Expired once the deadline is reached (``expires_at <= now``)."""
        now = now or utc_now()
        return ensure_utc(self.expires_at) <= now

    def time_remaining_seconds(self, now: Optional[datetime] = None) -> int:
        """Seconds left until expiry, zero once expired."""
        now = now or utc_now()
        remaining = (ensure_utc(self.expires_at) - now).total_seconds()
        return max(0, int(remaining))
