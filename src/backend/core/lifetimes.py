"""
Story lifetimes and expiring windows.

A story's lifetime is chosen from a closed set of named durations and turned
into an absolute expiry instant once, at creation time. Unknown tokens never
fail: lifetimes fall back to one week and expiring windows to one day.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Union


class StoryLifetime(str, Enum):
    """Named lifetimes a story can be created with."""

    ONE_HOUR = "1h"
    THREE_HOURS = "3h"
    SIX_HOURS = "6h"
    TWELVE_HOURS = "12h"
    ONE_DAY = "1d"
    THREE_DAYS = "3d"
    ONE_WEEK = "1w"
    TWO_WEEKS = "2w"
    ONE_MONTH = "1m"  # Fixed 30 days, not a calendar month


class ExpiringWindow(str, Enum):
    """Look-ahead windows for "expiring soon" selection."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"


LIFETIME_DURATIONS: dict[StoryLifetime, timedelta] = {
    StoryLifetime.ONE_HOUR: timedelta(hours=1),
    StoryLifetime.THREE_HOURS: timedelta(hours=3),
    StoryLifetime.SIX_HOURS: timedelta(hours=6),
    StoryLifetime.TWELVE_HOURS: timedelta(hours=12),
    StoryLifetime.ONE_DAY: timedelta(days=1),
    StoryLifetime.THREE_DAYS: timedelta(days=3),
    StoryLifetime.ONE_WEEK: timedelta(weeks=1),
    StoryLifetime.TWO_WEEKS: timedelta(weeks=2),
    StoryLifetime.ONE_MONTH: timedelta(days=30),
}

WINDOW_DURATIONS: dict[ExpiringWindow, timedelta] = {
    ExpiringWindow.HOUR: timedelta(hours=1),
    ExpiringWindow.DAY: timedelta(days=1),
    ExpiringWindow.WEEK: timedelta(weeks=1),
}

DEFAULT_LIFETIME = StoryLifetime.ONE_WEEK
DEFAULT_WINDOW = ExpiringWindow.DAY


def normalize_lifetime(token: Optional[Union[str, StoryLifetime]]) -> StoryLifetime:
    """Map a lifetime token to a known lifetime, defaulting to one week."""
    try:
        return StoryLifetime(token)
    except ValueError:
        return DEFAULT_LIFETIME


def resolve_expiry(token: Optional[Union[str, StoryLifetime]], reference: datetime) -> datetime:
    """
    Compute the absolute expiry instant for a lifetime token.

    Args:
        token: One of the StoryLifetime values. Anything else resolves to
            the one-week default.
        reference: Creation instant the duration is added to.

    Returns:
        reference advanced by the fixed duration of the lifetime.
    """
    return reference + LIFETIME_DURATIONS[normalize_lifetime(token)]


def normalize_window(token: Optional[Union[str, ExpiringWindow]]) -> ExpiringWindow:
    """Map a window token to a known window, defaulting to one day."""
    try:
        return ExpiringWindow(token)
    except ValueError:
        return DEFAULT_WINDOW


def resolve_window(token: Optional[Union[str, ExpiringWindow]]) -> timedelta:
    """Length of an expiring window."""
    return WINDOW_DURATIONS[normalize_window(token)]
