"""UTC timestamp helpers.

Stored records use the ISO-8601 form produced by JavaScript's
``Date.toISOString()`` (millisecond precision, ``Z`` suffix) so records stay
readable by JavaScript clients sharing the store.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


def utc_from_epoch(seconds: float) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def to_iso_z(moment: datetime) -> str:
    """Format an aware datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def next_midnight_utc(now: datetime) -> datetime:
    """Return 00:00:00 UTC of the day following ``now``."""
    today = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    return today + timedelta(days=1)
