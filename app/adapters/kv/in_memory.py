"""In-memory key-value store.

Notes:
- Per-process only: every worker holds its own copy of the data.
- Thread-safe: uses a lock around shared state.
- Values are kept JSON-encoded so callers get a fresh copy on every read,
  the same as with a remote store.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from app.adapters.kv.base import AbstractKVClient
from app.core.errors import StorageAppError

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    value: str | None = None
    members: set[str] | None = None
    expires_at: float | None = None


@dataclass
class _Stats:
    reads: int = 0
    writes: int = 0
    expirations: int = 0


class InMemoryKVClient(AbstractKVClient):
    """Dict-backed store with per-key expiry and string sets.

    Expired keys are evicted lazily when touched.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize the store.

        Args:
            clock: Time source returning UNIX time in seconds.
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._data: dict[str, _Entry] = {}
        self._stats = _Stats()

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"InMemoryKVClient(keys={len(self._data)})"

    def _live_entry_locked(self, key: str) -> _Entry | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at <= self._clock():
            del self._data[key]
            self._stats.expirations += 1
            logger.debug("kv.expired", extra={"key_prefix": key.split(":", 1)[0]})
            return None
        return entry

    def _set_entry_locked(self, key: str) -> _Entry:
        entry = self._live_entry_locked(key)
        if entry is None:
            entry = _Entry(members=set())
            self._data[key] = entry
        elif entry.members is None:
            raise StorageAppError(
                code="kv_wrong_type",
                message=f"Key '{key}' does not hold a set",
            )
        return entry

    async def get(self, key: str) -> Any | None:
        with self._lock:
            self._stats.reads += 1
            entry = self._live_entry_locked(key)
            if entry is None:
                return None
            if entry.value is None:
                raise StorageAppError(
                    code="kv_wrong_type",
                    message=f"Key '{key}' holds a set, not a value",
                )
            return json.loads(entry.value)

    async def set(
        self,
        key: str,
        value: Any,
        *,
        expire_after_seconds: int | None = None,
    ) -> None:
        if expire_after_seconds is not None and expire_after_seconds < 1:
            raise ValueError("expire_after_seconds must be >= 1")

        encoded = json.dumps(value)
        with self._lock:
            self._stats.writes += 1
            expires_at = (
                self._clock() + expire_after_seconds
                if expire_after_seconds is not None
                else None
            )
            self._data[key] = _Entry(value=encoded, expires_at=expires_at)

    async def delete(self, key: str) -> None:
        with self._lock:
            self._stats.writes += 1
            self._data.pop(key, None)

    async def set_add(self, key: str, member: str) -> None:
        with self._lock:
            self._stats.writes += 1
            self._set_entry_locked(key).members.add(member)  # type: ignore[union-attr]

    async def set_remove(self, key: str, member: str) -> None:
        with self._lock:
            self._stats.writes += 1
            entry = self._live_entry_locked(key)
            if entry is None:
                return
            if entry.members is None:
                raise StorageAppError(
                    code="kv_wrong_type",
                    message=f"Key '{key}' does not hold a set",
                )
            entry.members.discard(member)
            if not entry.members:
                # Redis drops empty sets
                del self._data[key]

    async def set_members(self, key: str) -> list[str]:
        with self._lock:
            self._stats.reads += 1
            entry = self._live_entry_locked(key)
            if entry is None:
                return []
            if entry.members is None:
                raise StorageAppError(
                    code="kv_wrong_type",
                    message=f"Key '{key}' does not hold a set",
                )
            return sorted(entry.members)

    def ttl(self, key: str) -> float | None:
        """Seconds until key expires; None if absent or persistent."""
        with self._lock:
            entry = self._live_entry_locked(key)
            if entry is None or entry.expires_at is None:
                return None
            return entry.expires_at - self._clock()

    def clear(self) -> None:
        """Remove all keys and reset counters."""
        with self._lock:
            self._data.clear()
            self._stats = _Stats()

    def stats(self) -> dict[str, int]:
        """Return lightweight store metrics without exposing values."""
        with self._lock:
            return {
                "keys": len(self._data),
                "reads": self._stats.reads,
                "writes": self._stats.writes,
                "expirations": self._stats.expirations,
            }
