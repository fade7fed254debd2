"""Upstash (Vercel KV) REST client adapter.

Each Redis command is POSTed to the REST endpoint as a JSON array, e.g.
``["SET", "gallery:abc", "{...}"]``, and the reply arrives as
``{"result": ...}`` or ``{"error": "..."}``. Values are JSON-encoded on write
and decoded on read, which keeps records readable by the JavaScript
``@vercel/kv`` client.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from app.adapters.kv.base import AbstractKVClient
from app.core.errors import StorageAppError

logger = logging.getLogger(__name__)


class UpstashKVClient(AbstractKVClient):
    """Async Redis-over-HTTP client. No retries: failures surface to callers."""

    def __init__(
        self,
        *,
        rest_api_url: str,
        rest_api_token: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            rest_api_url: REST endpoint (e.g., https://xyz.upstash.io).
            rest_api_token: Bearer token for the database.
            timeout_seconds: Per-command timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self._client = httpx.AsyncClient(
            base_url=rest_api_url.rstrip("/"),
            headers={"Authorization": f"Bearer {rest_api_token}"},
            timeout=timeout_seconds,
            transport=transport,
        )

    async def _command(self, *args: str | int) -> Any:
        command = str(args[0])
        try:
            response = await self._client.post("/", json=[str(a) for a in args])
        except httpx.HTTPError as exc:
            logger.error(
                "kv.request_failed",
                extra={"command": command, "error_type": type(exc).__name__},
            )
            raise StorageAppError(
                code="kv_unavailable",
                message="Key-value store request failed",
                details={"command": command},
            ) from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {"error": "unexpected reply shape"}

        if response.is_error or "error" in payload:
            logger.error(
                "kv.command_failed",
                extra={
                    "command": command,
                    "status_code": response.status_code,
                    "kv_error": payload.get("error"),
                },
            )
            raise StorageAppError(
                code="kv_command_failed",
                message=f"Key-value store rejected {command}",
                details={"command": command, "status_code": response.status_code},
            )

        return payload.get("result")

    async def get(self, key: str) -> Any | None:
        raw = await self._command("GET", key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            # Plain strings written by other clients
            return raw

    async def set(
        self,
        key: str,
        value: Any,
        *,
        expire_after_seconds: int | None = None,
    ) -> None:
        if expire_after_seconds is not None and expire_after_seconds < 1:
            raise ValueError("expire_after_seconds must be >= 1")

        args: list[str | int] = ["SET", key, json.dumps(value)]
        if expire_after_seconds is not None:
            args += ["EX", expire_after_seconds]
        await self._command(*args)

    async def delete(self, key: str) -> None:
        await self._command("DEL", key)

    async def set_add(self, key: str, member: str) -> None:
        await self._command("SADD", key, member)

    async def set_remove(self, key: str, member: str) -> None:
        await self._command("SREM", key, member)

    async def set_members(self, key: str) -> list[str]:
        result = await self._command("SMEMBERS", key)
        return [str(member) for member in result or []]

    async def aclose(self) -> None:
        await self._client.aclose()
