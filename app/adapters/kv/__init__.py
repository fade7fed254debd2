"""Key-value store adapters.

Quota, gallery and fabric records all live in a key-value store exposing
get/set/delete plus set primitives. The in-memory backend serves development
and tests; the Upstash backend talks to a hosted Redis over its REST API.
"""

from app.adapters.kv.base import AbstractKVClient, KVKeys
from app.adapters.kv.factory import create_kv_client
from app.adapters.kv.in_memory import InMemoryKVClient
from app.adapters.kv.upstash import UpstashKVClient

__all__ = [
    "AbstractKVClient",
    "InMemoryKVClient",
    "KVKeys",
    "UpstashKVClient",
    "create_kv_client",
]
