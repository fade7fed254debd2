from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from app.api.dependencies import get_rate_limiter
from app.core.identity import UserIdentity, remember_user, resolve_user
from app.schemas.rate_limit import RateLimitStatusResponse
from app.services.rate_limiter import RateLimiter

router = APIRouter(tags=["Quota"])


@router.get("/rate-limit", response_model=RateLimitStatusResponse)
async def get_rate_limit(
    response: Response,
    identity: UserIdentity = Depends(resolve_user),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> RateLimitStatusResponse:
    """Report how many generations the caller has left today.

    First-time visitors get the full allowance and a user cookie.
    """
    status = await limiter.get_remaining_generations(identity.user_id)
    remember_user(response, identity)
    return RateLimitStatusResponse(
        remaining=status.remaining,
        reset_at=status.reset_at,
        limit=limiter.daily_limit,
    )
