"""
Vote-related Pydantic schemas.
"""

from enum import Enum

from pydantic import BaseModel


class VoteAction(str, Enum):
    """What a vote request did to the ledger."""

    ADDED = "added"
    RETRACTED = "retracted"


class VoteResult(BaseModel):
    """Outcome of applying a vote."""

    story_id: str
    votes: int
    has_voted: bool
    action: VoteAction


class VoteStatus(BaseModel):
    """Whether the current user has voted on a story."""

    story_id: str
    has_voted: bool
