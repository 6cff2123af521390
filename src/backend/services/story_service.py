"""
Story lifecycle service.

Owns story creation and every expiry-aware read: public listing, random
picks, the expiring-soon pick, per-author listing and permalink lookup.

Expiry is never "fired". Every read compares ``expires_at`` with the clock at
call time, so a story simply stops matching public queries once its deadline
passes. Author and permalink lookups do not filter on expiry.
"""

import random
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.clock import Clock, utc_now
from core.config import settings
from core.exceptions import StorageError, ValidationError, translate_storage_errors
from core.lifetimes import (
    DEFAULT_LIFETIME,
    normalize_lifetime,
    resolve_expiry,
    resolve_window,
)
from core.security import generate_access_token
from models.story import Story as StoryModel
from repositories.provider import StoryRepositoryProtocol, UserRepositoryProtocol
from repositories.story_repository import StoryRepository
from repositories.user_repository import UserRepository
from schemas.converters import story_model_to_schema
from schemas.story import Story, StoryCreate, StorySortEnum

logger = structlog.get_logger(__name__)


@dataclass
class StoryPage:
    """One page of the public listing."""

    stories: list[Story]
    total: int
    page: int
    per_page: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.per_page - 1) // self.per_page if self.per_page else 0


class StoryService:
    """Story creation and time-aware queries."""

    def __init__(
        self,
        db: AsyncSession,
        story_repo: Optional[StoryRepositoryProtocol] = None,
        user_repo: Optional[UserRepositoryProtocol] = None,
        clock: Clock = utc_now,
        token_factory: Optional[Callable[[], str]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the story service.

        Args:
            db: Database session (used for savepoints around inserts)
            story_repo: Story repository, defaults to one bound to ``db``
            user_repo: User repository for author enrichment
            clock: Current-instant provider
            token_factory: Access token generator
            rng: Random source for random picks
        """
        self.db = db
        self.stories = story_repo or StoryRepository(db)
        self.users = user_repo or UserRepository(db)
        self.clock = clock
        self.token_factory = token_factory or generate_access_token
        self.rng = rng or random.SystemRandom()

    # ========================================================================
    # Creation
    # ========================================================================

    @translate_storage_errors("create_story")
    async def create_story(
        self,
        title: str,
        content: str,
        author_id: str,
        lifetime: Optional[str] = None,
    ) -> Story:
        """
        Create a public story that expires after the chosen lifetime.

        Raises:
            ValidationError: title or content outside their length bounds.
                Nothing is persisted in that case.
            StorageError: persistence failed, or no unique access token
                could be allocated.
        """
        payload = self._validate(title, content, lifetime)

        lifetime_token = normalize_lifetime(payload.lifetime)
        if lifetime_token.value != payload.lifetime:
            logger.info("story_lifetime_defaulted", requested=payload.lifetime, lifetime=lifetime_token.value)

        created_at = self.clock()
        expires_at = resolve_expiry(lifetime_token, created_at)

        attempts = max(1, settings.STORY_ACCESS_TOKEN_ATTEMPTS)
        for attempt in range(1, attempts + 1):
            access_token = self.token_factory()
            try:
                async with self.db.begin_nested():
                    story = await self.stories.create(
                        title=payload.title,
                        content=payload.content,
                        author_id=author_id,
                        access_token=access_token,
                        created_at=created_at,
                        expires_at=expires_at,
                    )
            except IntegrityError:
                # Only an access token clash is worth another attempt
                if await self.stories.get_by_access_token(access_token) is None:
                    raise
                logger.warning("access_token_collision", attempt=attempt)
                continue

            logger.info(
                "story_created",
                story_id=str(story.id),
                author_id=author_id,
                lifetime=lifetime_token.value,
                expires_at=expires_at.isoformat(),
            )
            author = await self.users.get_by_id(author_id)
            return story_model_to_schema(story, created_at, author)

        raise StorageError(
            "Could not allocate a unique access token",
            code="ACCESS_TOKEN_EXHAUSTED",
            details={"attempts": attempts},
        )

    def _validate(self, title: str, content: str, lifetime: Optional[str]) -> StoryCreate:
        try:
            return StoryCreate(
                title=title,
                content=content,
                lifetime=lifetime or DEFAULT_LIFETIME.value,
            )
        except PydanticValidationError as exc:
            raise ValidationError.from_errors("Invalid story data", "INVALID_STORY", exc.errors()) from exc

    # ========================================================================
    # Lookups (no expiry filter)
    # ========================================================================

    @translate_storage_errors("get_story")
    async def get_by_id(self, story_id: str) -> Optional[Story]:
        story = await self.stories.get_by_id(story_id)
        return await self._single(story)

    @translate_storage_errors("get_story_by_access_token")
    async def get_by_access_token(self, access_token: str) -> Optional[Story]:
        """Permalink lookup. Expired stories are returned as well."""
        story = await self.stories.get_by_access_token(access_token)
        return await self._single(story)

    @translate_storage_errors("get_stories_by_author")
    async def get_by_author(self, author_id: str) -> list[Story]:
        """Every story of an author, active and expired, newest first."""
        stories = await self.stories.list_by_author(author_id)
        return await self._with_authors(stories)

    # ========================================================================
    # Public queries (live stories only)
    # ========================================================================

    @translate_storage_errors("list_public_stories")
    async def list_public(
        self,
        sort: str = StorySortEnum.LATEST.value,
        page: int = 1,
        per_page: Optional[int] = None,
    ) -> StoryPage:
        """
        List public, non-expired stories.

        ``latest`` orders by creation time, ``popular`` by votes with creation
        time as tie-break. Unknown sort modes fall back to ``latest``.
        """
        try:
            sort_mode = StorySortEnum(sort)
        except ValueError:
            sort_mode = StorySortEnum.LATEST
        page = max(1, page)
        per_page = min(max(1, per_page or settings.STORY_PAGE_SIZE), settings.STORY_MAX_PAGE_SIZE)

        now = self.clock()
        stories, total = await self.stories.list_public(now, sort=sort_mode.value, page=page, per_page=per_page)
        return StoryPage(
            stories=await self._with_authors(stories, now),
            total=total,
            page=page,
            per_page=per_page,
        )

    @translate_storage_errors("get_random_story")
    async def get_random_public(self) -> Optional[Story]:
        """Uniformly random live public story, or None if there is none."""
        now = self.clock()
        story_ids = await self.stories.list_live_ids(now)
        return await self._pick(story_ids, now)

    @translate_storage_errors("get_random_expiring_story")
    async def get_random_expiring_within(self, window: Optional[str] = None) -> Optional[Story]:
        """
        Uniformly random live public story expiring within ``window``.

        Matches ``now < expires_at <= now + window``. Unknown windows mean
        ``day``.
        """
        now = self.clock()
        story_ids = await self.stories.list_live_ids(now, expires_until=now + resolve_window(window))
        return await self._pick(story_ids, now)

    # ========================================================================
    # Helpers
    # ========================================================================

    async def _pick(self, story_ids: list[str], now: datetime) -> Optional[Story]:
        if not story_ids:
            return None
        story = await self.stories.get_by_id(self.rng.choice(story_ids))
        return await self._single(story, now)

    async def _single(self, story: Optional[StoryModel], now: Optional[datetime] = None) -> Optional[Story]:
        if story is None:
            return None
        enriched = await self._with_authors([story], now)
        return enriched[0]

    async def _with_authors(self, stories: Iterable[StoryModel], now: Optional[datetime] = None) -> list[Story]:
        """Attach author summaries, fetching each distinct author once."""
        stories = list(stories)
        now = now or self.clock()
        authors = await self.users.get_many({str(story.author_id) for story in stories})
        return [story_model_to_schema(story, now, authors.get(str(story.author_id))) for story in stories]

