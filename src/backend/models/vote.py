"""
Vote ledger model.

One row per (user, story) vote. The unique constraint is what serialises
concurrent first votes from the same user.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Index, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base

UNIQUE_VOTE_CONSTRAINT = "uq_votes_user_story"


class Vote(Base):
    """Ledger entry recording that a user voted on a story."""

    __tablename__ = "votes"

    __table_args__ = (
        UniqueConstraint("user_id", "story_id", name=UNIQUE_VOTE_CONSTRAINT),
        Index("ix_votes_story_created", "story_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    story_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("stories.id", ondelete="CASCADE"),
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
