"""Application-level exception types.

Every failure of a submission is expressed as one of these errors and turned
into an HTTP response by the global exception handlers, so none of them
escapes the request boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypedDict

if TYPE_CHECKING:
    from app.services.rate_limiter import RateLimitDecision


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    fields: list[str]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when a submission payload is missing fields or malformed."""


class PersistenceAppError(AppError):
    """Raised when the sighting store fails to save or read records."""


@dataclass
class RateLimitAppError(AppError):
    """Raised when a client has used up its submission quota."""

    decision: "RateLimitDecision | None" = None
