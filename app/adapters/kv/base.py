"""Key-value client interface and key naming scheme.

Services depend on this abstraction only, so the storage backend can be
swapped without touching quota, gallery or catalog logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class KVKeys:
    """Key patterns shared with any other writer of the same store."""

    FABRIC_INDEX = "fabrics:index"

    @staticmethod
    def fabric(fabric_id: str) -> str:
        return f"fabric:{fabric_id}"

    @staticmethod
    def fabrics_by_category(category: str) -> str:
        return f"fabrics:category:{category}"

    @staticmethod
    def rate_limit(user_id: str) -> str:
        return f"ratelimit:{user_id}"

    @staticmethod
    def gallery(user_id: str) -> str:
        return f"gallery:{user_id}"


class AbstractKVClient(ABC):
    """Interface for key-value stores holding JSON values and string sets."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the decoded JSON value for key, or None if absent/expired."""
        raise NotImplementedError

    @abstractmethod
    async def set(
        self,
        key: str,
        value: Any,
        *,
        expire_after_seconds: int | None = None,
    ) -> None:
        """Store a JSON-serializable value.

        Args:
            key: Record key.
            value: JSON-serializable value.
            expire_after_seconds: Optional TTL; the store drops the key afterwards.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key. Absent keys are ignored."""
        raise NotImplementedError

    @abstractmethod
    async def set_add(self, key: str, member: str) -> None:
        """Add member to the set stored at key."""
        raise NotImplementedError

    @abstractmethod
    async def set_remove(self, key: str, member: str) -> None:
        """Remove member from the set stored at key. Absent members are ignored."""
        raise NotImplementedError

    @abstractmethod
    async def set_members(self, key: str) -> list[str]:
        """Return all members of the set at key ([] if it does not exist)."""
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release network resources held by the client."""
        return None
