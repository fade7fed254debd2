"""Unit tests for the in-memory key-value adapter."""

import asyncio

import pytest

from app.adapters.kv.in_memory import InMemoryKVClient
from app.core.errors import StorageAppError


def test_get_missing_key_returns_none(kv: InMemoryKVClient) -> None:
    assert asyncio.run(kv.get("nope")) is None


def test_set_then_get_returns_json_value(kv: InMemoryKVClient) -> None:
    record = {"userId": "u1", "images": [{"id": "a"}]}
    asyncio.run(kv.set("gallery:u1", record))

    assert asyncio.run(kv.get("gallery:u1")) == record


def test_get_returns_independent_copy(kv: InMemoryKVClient) -> None:
    """Mutating a read value must not change what is stored."""
    asyncio.run(kv.set("k", {"items": [1]}))

    value = asyncio.run(kv.get("k"))
    value["items"].append(2)

    assert asyncio.run(kv.get("k")) == {"items": [1]}


def test_key_expires_after_ttl(kv: InMemoryKVClient, clock) -> None:
    asyncio.run(kv.set("ratelimit:u1", {"count": 1}, expire_after_seconds=60))

    clock.advance(59)
    assert asyncio.run(kv.get("ratelimit:u1")) == {"count": 1}
    assert kv.ttl("ratelimit:u1") == pytest.approx(1)

    clock.advance(1)
    assert asyncio.run(kv.get("ratelimit:u1")) is None
    assert kv.stats()["expirations"] == 1


def test_set_without_ttl_is_persistent(kv: InMemoryKVClient, clock) -> None:
    asyncio.run(kv.set("fabric:1", {"id": "1"}))
    clock.advance(10 * 365 * 86400)

    assert asyncio.run(kv.get("fabric:1")) == {"id": "1"}
    assert kv.ttl("fabric:1") is None


def test_overwrite_replaces_ttl(kv: InMemoryKVClient, clock) -> None:
    asyncio.run(kv.set("k", 1, expire_after_seconds=10))
    asyncio.run(kv.set("k", 2))

    clock.advance(100)
    assert asyncio.run(kv.get("k")) == 2


@pytest.mark.parametrize("ttl", [0, -5])
def test_rejects_non_positive_ttl(kv: InMemoryKVClient, ttl: int) -> None:
    with pytest.raises(ValueError):
        asyncio.run(kv.set("k", 1, expire_after_seconds=ttl))


def test_delete_removes_key_and_ignores_missing(kv: InMemoryKVClient) -> None:
    asyncio.run(kv.set("k", "v"))
    asyncio.run(kv.delete("k"))
    asyncio.run(kv.delete("never-there"))

    assert asyncio.run(kv.get("k")) is None


def test_set_operations(kv: InMemoryKVClient) -> None:
    asyncio.run(kv.set_add("fabrics:index", "b"))
    asyncio.run(kv.set_add("fabrics:index", "a"))
    asyncio.run(kv.set_add("fabrics:index", "a"))

    assert asyncio.run(kv.set_members("fabrics:index")) == ["a", "b"]

    asyncio.run(kv.set_remove("fabrics:index", "a"))
    asyncio.run(kv.set_remove("fabrics:index", "missing"))
    assert asyncio.run(kv.set_members("fabrics:index")) == ["b"]


def test_empty_set_is_dropped(kv: InMemoryKVClient) -> None:
    asyncio.run(kv.set_add("s", "only"))
    asyncio.run(kv.set_remove("s", "only"))

    assert asyncio.run(kv.set_members("s")) == []
    assert kv.stats()["keys"] == 0


def test_set_members_of_missing_key_is_empty(kv: InMemoryKVClient) -> None:
    assert asyncio.run(kv.set_members("fabrics:category:wool")) == []


def test_type_mismatch_raises_storage_error(kv: InMemoryKVClient) -> None:
    asyncio.run(kv.set("value-key", "v"))
    asyncio.run(kv.set_add("set-key", "m"))

    with pytest.raises(StorageAppError) as exc_info:
        asyncio.run(kv.set_add("value-key", "m"))
    assert exc_info.value.code == "kv_wrong_type"

    with pytest.raises(StorageAppError):
        asyncio.run(kv.get("set-key"))

    with pytest.raises(StorageAppError):
        asyncio.run(kv.set_members("value-key"))


def test_clear_resets_data_and_stats() -> None:
    kv = InMemoryKVClient()
    asyncio.run(kv.set("k", 1))
    asyncio.run(kv.get("k"))

    kv.clear()

    assert kv.stats() == {"keys": 0, "reads": 0, "writes": 0, "expirations": 0}
