"""Unit tests for the per-user daily generation quota."""

import asyncio
from datetime import datetime, timezone

import pytest

from app.adapters.kv.base import KVKeys
from app.services.rate_limiter import NEW_PERIOD_TTL_SECONDS, RateLimiter

TOMORROW_MIDNIGHT = datetime(2026, 10, 20, tzinfo=timezone.utc)


@pytest.fixture
def limiter(kv, clock) -> RateLimiter:
    return RateLimiter(kv, daily_limit=5, clock=clock)


def test_new_user_has_full_quota_until_next_midnight(limiter: RateLimiter, kv) -> None:
    result = asyncio.run(limiter.check_rate_limit("u1"))

    assert result.allowed is True
    assert result.remaining == 5
    assert result.limit == 5
    assert result.reset_at == TOMORROW_MIDNIGHT
    # Checking is read-only
    assert asyncio.run(kv.get(KVKeys.rate_limit("u1"))) is None


def test_first_increment_starts_period_with_day_ttl(limiter: RateLimiter, kv) -> None:
    asyncio.run(limiter.increment_rate_limit("u1"))

    assert asyncio.run(kv.get("ratelimit:u1")) == {
        "count": 1,
        "resetAt": "2026-10-20T00:00:00.000Z",
    }
    assert kv.ttl("ratelimit:u1") == pytest.approx(NEW_PERIOD_TTL_SECONDS)


def test_later_increment_expires_at_reset_boundary(limiter: RateLimiter, kv, clock) -> None:
    asyncio.run(limiter.increment_rate_limit("u1"))
    clock.advance(30.5)
    asyncio.run(limiter.increment_rate_limit("u1"))

    assert asyncio.run(kv.get("ratelimit:u1"))["count"] == 2
    # 15:00:30.5 -> midnight is 32369.5s, floored
    assert kv.ttl("ratelimit:u1") == pytest.approx(32369)


def test_blocks_after_daily_limit(limiter: RateLimiter) -> None:
    async def _consume_all():
        for _ in range(5):
            assert (await limiter.check_rate_limit("u1")).allowed
            await limiter.increment_rate_limit("u1")
        return await limiter.check_rate_limit("u1")

    result = asyncio.run(_consume_all())

    assert result.allowed is False
    assert result.remaining == 0
    assert result.reset_at == TOMORROW_MIDNIGHT


def test_remaining_decreases_per_generation(limiter: RateLimiter) -> None:
    asyncio.run(limiter.increment_rate_limit("u1"))
    asyncio.run(limiter.increment_rate_limit("u1"))

    status = asyncio.run(limiter.get_remaining_generations("u1"))

    assert status.remaining == 3
    assert status.reset_at == TOMORROW_MIDNIGHT


def test_users_are_isolated(limiter: RateLimiter) -> None:
    for _ in range(5):
        asyncio.run(limiter.increment_rate_limit("u1"))

    assert asyncio.run(limiter.check_rate_limit("u1")).allowed is False
    assert asyncio.run(limiter.check_rate_limit("u2")).remaining == 5


def test_stale_record_is_ignored_after_reset(limiter: RateLimiter, kv) -> None:
    """A record past its resetAt counts as absent even if the store still holds it."""
    asyncio.run(kv.set("ratelimit:u1", {"count": 5, "resetAt": "2026-10-19T00:00:00.000Z"}))

    result = asyncio.run(limiter.check_rate_limit("u1"))
    assert result.allowed is True
    assert result.remaining == 5
    assert result.reset_at == TOMORROW_MIDNIGHT

    asyncio.run(limiter.increment_rate_limit("u1"))
    assert asyncio.run(kv.get("ratelimit:u1")) == {
        "count": 1,
        "resetAt": "2026-10-20T00:00:00.000Z",
    }


def test_day_rollover_restores_quota(kv, clock) -> None:
    clock.now = datetime(2026, 10, 19, 23, 59, tzinfo=timezone.utc).timestamp()
    limiter = RateLimiter(kv, daily_limit=5, clock=clock)

    for _ in range(5):
        asyncio.run(limiter.increment_rate_limit("u1"))
    assert asyncio.run(limiter.check_rate_limit("u1")).allowed is False

    clock.now = datetime(2026, 10, 20, 0, 0, 1, tzinfo=timezone.utc).timestamp()
    result = asyncio.run(limiter.check_rate_limit("u1"))

    assert result.allowed is True
    assert result.remaining == 5
    assert result.reset_at == datetime(2026, 10, 21, tzinfo=timezone.utc)


def test_remaining_never_negative(limiter: RateLimiter, kv) -> None:
    asyncio.run(kv.set("ratelimit:u1", {"count": 9, "resetAt": "2026-10-20T00:00:00.000Z"}))

    result = asyncio.run(limiter.check_rate_limit("u1"))

    assert result.remaining == 0
    assert result.allowed is False


def test_custom_daily_limit(kv, clock) -> None:
    limiter = RateLimiter(kv, daily_limit=2, clock=clock)
    asyncio.run(limiter.increment_rate_limit("u1"))

    result = asyncio.run(limiter.check_rate_limit("u1"))

    assert limiter.daily_limit == 2
    assert result.remaining == 1
    assert result.limit == 2


@pytest.mark.parametrize("daily_limit", [0, -1])
def test_invalid_daily_limit(kv, daily_limit: int) -> None:
    with pytest.raises(ValueError):
        RateLimiter(kv, daily_limit=daily_limit)


def test_retry_after_seconds(limiter: RateLimiter, clock) -> None:
    result = asyncio.run(limiter.check_rate_limit("u1"))

    assert result.retry_after_seconds(clock()) == 9 * 3600
    assert result.retry_after_seconds(TOMORROW_MIDNIGHT.timestamp() + 5) == 0
