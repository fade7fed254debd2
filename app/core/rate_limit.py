"""Quota headers for throttled responses."""

from __future__ import annotations

import time

from app.core.config import settings
from app.services.rate_limiter import RateLimitResult


def build_rate_limit_headers(result: RateLimitResult, now: float | None = None) -> dict[str, str]:
    """Render Retry-After and X-RateLimit-* headers for a quota result.

    Returns:
        Header mapping, empty when APP_RATE_LIMIT_INCLUDE_HEADERS is false.
    """

    if not settings.app.rate_limit_include_headers:
        return {}

    now = time.time() if now is None else now
    return {
        "Retry-After": str(result.retry_after_seconds(now)),
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(int(result.reset_at.timestamp())),
    }
