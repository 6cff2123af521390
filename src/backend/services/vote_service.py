"""
Vote ledger service.

Keeps ``stories.votes`` equal to the number of ledger rows for the story.
Each vote request runs in one savepoint that locks the story row, checks the
ledger and then writes both the ledger row and the counter, so a failure
leaves neither half applied.

Repeat votes follow the configured policy:
- toggle (default): a second vote by the same user retracts the first
- reject: a second vote raises DuplicateVoteError
"""

from enum import Enum
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.clock import Clock, utc_now
from core.config import settings
from core.exceptions import DuplicateVoteError, StoryExpiredError, StoryNotFoundError, translate_storage_errors
from models.vote import UNIQUE_VOTE_CONSTRAINT
from repositories.provider import StoryRepositoryProtocol, VoteRepositoryProtocol
from repositories.story_repository import StoryRepository
from repositories.vote_repository import VoteRepository
from schemas.vote import VoteAction, VoteResult

logger = structlog.get_logger(__name__)


class VotePolicy(str, Enum):
    """How a repeat vote from the same user is treated."""

    TOGGLE = "toggle"
    REJECT = "reject"


class VoteService:
    """Service enforcing one vote per (user, story)."""

    def __init__(
        self,
        db: AsyncSession,
        story_repo: Optional[StoryRepositoryProtocol] = None,
        vote_repo: Optional[VoteRepositoryProtocol] = None,
        clock: Clock = utc_now,
        policy: Optional[VotePolicy] = None,
    ):
        self.db = db
        self.stories = story_repo or StoryRepository(db)
        self.votes = vote_repo or VoteRepository(db)
        self.clock = clock
        self.policy = VotePolicy(policy or settings.VOTE_POLICY)

    @translate_storage_errors("has_voted")
    async def has_voted(self, story_id: str, user_id: str) -> bool:
        return await self.votes.exists(story_id, user_id)

    @translate_storage_errors("apply_vote")
    async def apply_vote(self, story_id: str, user_id: str) -> VoteResult:
        """
        Cast, or under the toggle policy retract, the user's vote.

        Raises:
            StoryNotFoundError: story does not exist
            StoryExpiredError: story's deadline has passed (``expires_at <= now``)
            DuplicateVoteError: repeat vote under the reject policy, or a
                concurrent request already inserted the same ledger row
            StorageError: any other persistence failure, including integrity
                errors from other constraints
        """
        now = self.clock()
        try:
            async with self.db.begin_nested():
                story = await self.stories.get_by_id(story_id, for_update=True)
                if story is None:
                    raise StoryNotFoundError(story_id)
                if story.is_expired(now):
                    raise StoryExpiredError(story_id)

                if await self.votes.exists(story_id, user_id):
                    if self.policy is VotePolicy.REJECT:
                        raise DuplicateVoteError(story_id, user_id)
                    await self.votes.delete(story_id, user_id)
                    votes = await self.stories.decrement_votes(story_id)
                    action = VoteAction.RETRACTED
                else:
                    await self.votes.create(story_id, user_id)
                    votes = await self.stories.increment_votes(story_id)
                    action = VoteAction.ADDED
        except IntegrityError as exc:
            if UNIQUE_VOTE_CONSTRAINT not in str(exc.orig):
                raise
            # A concurrent first vote already inserted the ledger row
            logger.warning("concurrent_duplicate_vote", story_id=story_id, user_id=user_id)
            raise DuplicateVoteError(story_id, user_id) from exc

        logger.info("vote_applied", story_id=story_id, user_id=user_id, action=action.value, votes=votes)
        return VoteResult(
            story_id=story_id,
            votes=votes or 0,
            has_voted=action is VoteAction.ADDED,
            action=action,
        )
