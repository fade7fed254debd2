"""Application-level exception types.

Expected business outcomes (gallery full, quota exhausted, missing fabric) are
returned as result values by the services. The errors below cover invalid
input, configuration problems and failing collaborators, and are mapped to
HTTP responses by the global exception handlers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    code: str
    message: str
    hint: str
    provider: str
    model: str
    command: str
    status_code: int
    context: NotRequired[dict[str, Any]]


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
    """Raised when input/config validation fails."""


class AuthenticationAppError(AppError):
    """Raised when authentication/authorization fails."""


class ImageGenerationAppError(AppError):
    """Raised when the image generation provider fails or returns no image."""


class StorageAppError(AppError):
    """Raised when the key-value store or media store cannot complete a call."""
