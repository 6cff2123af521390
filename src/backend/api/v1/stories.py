"""
Story endpoints.

Listing and random picks only ever see live public stories. The permalink
(``/access/{token}``) and the author's own listing also return expired
stories so authors can still reach what they wrote.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from api.deps import get_current_user, get_story_service, get_vote_service
from core.config import settings
from core.exceptions import NotFoundError, StoryExpiredError, StoryNotFoundError
from schemas.story import Story, StoryCreate, StoryListResponse, StorySortEnum
from schemas.user import UserResponse
from schemas.vote import VoteResult, VoteStatus
from services.story_service import StoryService
from services.vote_service import VoteService

router = APIRouter()


def _no_stories(message: str) -> NotFoundError:
    return NotFoundError(message, code="NO_STORIES_AVAILABLE")


@router.post("", response_model=Story, status_code=status.HTTP_201_CREATED)
async def create_story(
    story_data: StoryCreate,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    service: StoryService = Depends(get_story_service),
) -> Story:
    """Publish a story. It disappears from public views once its lifetime passes."""
    return await service.create_story(
        title=story_data.title,
        content=story_data.content,
        author_id=current_user.id,
        lifetime=story_data.lifetime,
    )


@router.get("", response_model=StoryListResponse)
async def list_stories(
    sort: str = Query(StorySortEnum.LATEST.value, description="latest or popular"),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.STORY_PAGE_SIZE, ge=1, le=settings.STORY_MAX_PAGE_SIZE),
    service: StoryService = Depends(get_story_service),
) -> StoryListResponse:
    result = await service.list_public(sort=sort, page=page, per_page=per_page)
    return StoryListResponse(
        stories=result.stories,
        total=result.total,
        page=result.page,
        per_page=result.per_page,
        total_pages=result.total_pages,
    )


@router.get("/mine", response_model=list[Story])
async def my_stories(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    service: StoryService = Depends(get_story_service),
) -> list[Story]:
    """All stories of the current user, expired ones included, newest first."""
    return await service.get_by_author(current_user.id)


@router.get("/random", response_model=Story)
async def random_story(service: StoryService = Depends(get_story_service)) -> Story:
    story = await service.get_random_public()
    if story is None:
        raise _no_stories("No stories available")
    return story


@router.get("/expiring/{window}", response_model=Story)
async def random_expiring_story(
    window: str,
    service: StoryService = Depends(get_story_service),
) -> Story:
    """Random live story expiring within ``hour``, ``day`` or ``week``."""
    story = await service.get_random_expiring_within(window)
    if story is None:
        raise _no_stories("No stories expiring in this window")
    return story


@router.get("/access/{access_token}", response_model=Story)
async def story_by_access_token(
    access_token: str,
    service: StoryService = Depends(get_story_service),
) -> Story:
    story = await service.get_by_access_token(access_token)
    if story is None:
        raise NotFoundError("Story not found", code="STORY_NOT_FOUND", details={"access_token": access_token})
    return story


@router.get("/{story_id}", response_model=Story)
async def get_story(
    story_id: str,
    service: StoryService = Depends(get_story_service),
) -> Story:
    story = await service.get_by_id(story_id)
    if story is None:
        raise StoryNotFoundError(story_id)
    if story.is_public and story.is_expired:
        raise StoryExpiredError(story_id)
    return story


@router.post("/{story_id}/vote", response_model=VoteResult)
async def vote(
    story_id: str,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    service: VoteService = Depends(get_vote_service),
) -> VoteResult:
    """Vote for a story. Voting again retracts the vote unless repeats are rejected."""
    return await service.apply_vote(story_id, current_user.id)


@router.get("/{story_id}/vote", response_model=VoteStatus)
async def vote_status(
    story_id: str,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    service: VoteService = Depends(get_vote_service),
) -> VoteStatus:
    has_voted = await service.has_voted(story_id, current_user.id)
    return VoteStatus(story_id=story_id, has_voted=has_voted)
