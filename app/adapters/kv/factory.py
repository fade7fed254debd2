"""Factory for key-value client instances."""

from app.adapters.kv.base import AbstractKVClient
from app.adapters.kv.in_memory import InMemoryKVClient
from app.adapters.kv.upstash import UpstashKVClient
from app.core.config import settings
from app.core.errors import ValidationAppError


def create_kv_client() -> AbstractKVClient:
    """Instantiate the configured key-value backend.

    Returns:
        AbstractKVClient: In-memory or Upstash client.

    Raises:
        ValidationAppError: If the backend is unknown or misconfigured.
    """
    backend = settings.kv.backend.lower()

    if backend == "memory":
        return InMemoryKVClient()

    if backend == "upstash":
        if not settings.kv.rest_api_url or not settings.kv.rest_api_token:
            raise ValidationAppError(
                code="kv_missing_credentials",
                message="Upstash backend requires KV_REST_API_URL and KV_REST_API_TOKEN",
            )
        return UpstashKVClient(
            rest_api_url=settings.kv.rest_api_url,
            rest_api_token=settings.kv.rest_api_token,
            timeout_seconds=settings.kv.timeout_seconds,
        )

    raise ValidationAppError(
        code="kv_unknown_backend",
        message=f"Unknown KV backend: '{backend}'. Supported backends: memory, upstash",
    )
