"""
Error taxonomy for StoryVault.

Every error the core raises carries a ``kind`` from a small closed set
(validation, not_found, expired, conflict, storage_error, plus
authentication for the identity surface) so the API layer can translate it
without inspecting messages.
"""

import functools
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class StoryVaultError(Exception):
    """Base exception for all StoryVault errors."""

    kind = "error"
    status_code = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "kind": self.kind,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(StoryVaultError):
    """Input failed validation (title/body bounds, malformed identity data)."""

    kind = "validation"
    status_code = 400

    @classmethod
    def from_errors(cls, message: str, code: str, errors: Iterable[dict[str, Any]]) -> "ValidationError":
        """Build from pydantic-style error dicts (``loc`` and ``msg`` keys)."""
        fields = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in errors
        ]
        return cls(message, code=code, details={"errors": fields})


class NotFoundError(StoryVaultError):
    """Referenced story, user or token does not exist."""

    kind = "not_found"
    status_code = 404


class ExpiredError(StoryVaultError):
    """Operation requires a story that has not expired yet."""

    kind = "expired"
    status_code = 410


class ConflictError(StoryVaultError):
    """Operation conflicts with existing state."""

    kind = "conflict"
    status_code = 409


class StorageError(StoryVaultError):
    """Persistence layer failure."""

    kind = "storage_error"
    status_code = 503


class AuthenticationError(StoryVaultError):
    """Credentials missing or invalid."""

    kind = "authentication"
    status_code = 401


class StoryNotFoundError(NotFoundError):
    def __init__(self, story_id: str):
        super().__init__(
            f"Story not found: {story_id}",
            code="STORY_NOT_FOUND",
            details={"story_id": story_id},
        )


class StoryExpiredError(ExpiredError):
    def __init__(self, story_id: str):
        super().__init__(
            f"Story has expired: {story_id}",
            code="STORY_EXPIRED",
            details={"story_id": story_id},
        )


class DuplicateVoteError(ConflictError):
    def __init__(self, story_id: str, user_id: str):
        super().__init__(
            "User has already voted for this story",
            code="DUPLICATE_VOTE",
            details={"story_id": story_id, "user_id": user_id},
        )


class EmailInUseError(ConflictError):
    def __init__(self, email: str):
        super().__init__(
            "Email already in use",
            code="EMAIL_IN_USE",
            details={"email": email},
        )


class InvalidCredentialsError(AuthenticationError):
    def __init__(self, message: str = "Incorrect email or password"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class UnsupportedProviderError(ValidationError):
    def __init__(self, provider: str):
        super().__init__(
            f"Unsupported identity provider: {provider}",
            code="UNSUPPORTED_PROVIDER",
            details={"provider": provider},
        )


def translate_storage_errors(
    operation: str,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorate an async service method so SQLAlchemy failures surface as StorageError.

    Domain errors raised inside the method pass through unchanged. Nothing
    is retried.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await func(*args, **kwargs)
            except SQLAlchemyError as exc:
                logger.exception("storage_failure", operation=operation, error_type=type(exc).__name__)
                raise StorageError(
                    f"Storage failure during {operation}",
                    code="STORAGE_ERROR",
                    details={"operation": operation},
                ) from exc

        return wrapper

    return decorator
