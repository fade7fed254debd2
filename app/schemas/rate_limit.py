"""Pydantic schemas for daily generation quotas."""

from __future__ import annotations

from pydantic import Field

from app.schemas.common import CamelModel, UtcTimestamp


class UserQuota(CamelModel):
    """Stored quota record at ``ratelimit:<userId>``."""

    count: int = Field(..., ge=0, description="Generations consumed in the current period.")
    reset_at: UtcTimestamp = Field(..., description="UTC instant the count resets to zero.")


class RateLimitStatusResponse(CamelModel):
    """Quota status returned to the UI."""

    remaining: int = Field(..., ge=0, description="Generations left today.")
    reset_at: UtcTimestamp = Field(..., description="Next UTC midnight reset.")
    limit: int = Field(..., ge=1, description="Daily generation allowance.")
