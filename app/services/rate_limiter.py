"""Per-user daily generation quota.

Each anonymous user may run ``daily_limit`` generations per UTC day. The
period starts with the first generation and ends at the following UTC
midnight. The quota record stores its own ``resetAt`` so that a record the
store has not yet expired is still recognised as stale once the boundary has
passed.

Check and increment are separate, non-atomic calls: two concurrent requests
from the same user can both pass ``check_rate_limit`` and overshoot the limit
slightly.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from app.adapters.kv.base import AbstractKVClient, KVKeys
from app.core.logging import hash_identifier
from app.schemas.rate_limit import UserQuota
from app.utils.timestamps import next_midnight_utc, utc_from_epoch

logger = logging.getLogger(__name__)

DAILY_LIMIT = 5

# Storage expiry for a freshly started period
NEW_PERIOD_TTL_SECONDS = 86400


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a quota check.

    Attributes:
        allowed: Whether another generation may run now.
        remaining: Generations left in the current period.
        reset_at: UTC instant the quota resets.
        limit: Configured daily allowance.
    """

    allowed: bool
    remaining: int
    reset_at: datetime
    limit: int

    def retry_after_seconds(self, now: float) -> int:
        return max(0, math.ceil(self.reset_at.timestamp() - now))


@dataclass(frozen=True)
class QuotaStatus:
    remaining: int
    reset_at: datetime


class RateLimiter:
    """Daily quota backed by one ``ratelimit:<userId>`` record per user."""

    def __init__(
        self,
        kv: AbstractKVClient,
        *,
        daily_limit: int = DAILY_LIMIT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            kv: Key-value store holding quota records.
            daily_limit: Generations allowed per user per UTC day.
            clock: Time source returning UNIX time in seconds.

        Raises:
            ValueError: If daily_limit is below 1.
        """
        if daily_limit < 1:
            raise ValueError("daily_limit must be >= 1")

        self._kv = kv
        self._daily_limit = daily_limit
        self._clock = clock

    @property
    def daily_limit(self) -> int:
        return self._daily_limit

    async def _load_quota(self, user_id: str) -> UserQuota | None:
        data = await self._kv.get(KVKeys.rate_limit(user_id))
        if data is None:
            return None
        return UserQuota.model_validate(data)

    async def check_rate_limit(self, user_id: str) -> RateLimitResult:
        """Report whether user_id may generate now. Read-only."""
        quota = await self._load_quota(user_id)
        now = utc_from_epoch(self._clock())

        if quota is None or quota.reset_at <= now:
            result = RateLimitResult(
                allowed=True,
                remaining=self._daily_limit,
                reset_at=next_midnight_utc(now),
                limit=self._daily_limit,
            )
        else:
            remaining = max(0, self._daily_limit - quota.count)
            result = RateLimitResult(
                allowed=remaining > 0,
                remaining=remaining,
                reset_at=quota.reset_at,
                limit=self._daily_limit,
            )

        logger.debug(
            "rate_limit.checked",
            extra={
                "user_hash": hash_identifier(user_id),
                "allowed": result.allowed,
                "remaining": result.remaining,
            },
        )
        return result

    async def increment_rate_limit(self, user_id: str) -> None:
        """Record one generation for user_id.

        Performs no admission check; call ``check_rate_limit`` first.
        """
        key = KVKeys.rate_limit(user_id)
        quota = await self._load_quota(user_id)
        now = utc_from_epoch(self._clock())

        if quota is None or quota.reset_at <= now:
            fresh = UserQuota(count=1, reset_at=next_midnight_utc(now))
            await self._kv.set(key, fresh.to_record(), expire_after_seconds=NEW_PERIOD_TTL_SECONDS)
            count = fresh.count
        else:
            # The record must not outlive its own reset boundary
            ttl = max(1, math.floor((quota.reset_at - now).total_seconds()))
            updated = UserQuota(count=quota.count + 1, reset_at=quota.reset_at)
            await self._kv.set(key, updated.to_record(), expire_after_seconds=ttl)
            count = updated.count

        logger.info(
            "rate_limit.incremented",
            extra={
                "user_hash": hash_identifier(user_id),
                "count": count,
                "limit": self._daily_limit,
            },
        )

    async def get_remaining_generations(self, user_id: str) -> QuotaStatus:
        result = await self.check_rate_limit(user_id)
        return QuotaStatus(remaining=result.remaining, reset_at=result.reset_at)
