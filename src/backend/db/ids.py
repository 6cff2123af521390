"""
Primary key helpers.

Every table keys on a PostgreSQL ``UUID``. A lookup with a value that is not
a UUID can never match a row, and sending it to the server fails the cast.
"""

from typing import Any
from uuid import UUID


def is_uuid(value: Any) -> bool:
    """True if ``value`` parses as a UUID."""
    if isinstance(value, UUID):
        return True
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True
