"""Filesystem media store served by FastAPI StaticFiles.

Files land under ``root_dir/<folder>/<public_id>.<ext>`` and are exposed at
``base_url/<folder>/<public_id>.<ext>``. There is no image transformation
service, so thumbnails are the original image.
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from urllib.parse import urlsplit

import httpx

from app.adapters.media.base import AbstractMediaStore
from app.core.errors import StorageAppError, ValidationAppError

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}
_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


class LocalMediaStore(AbstractMediaStore):
    """Write images to disk and fetch them back by URL."""

    def __init__(
        self,
        root_dir: str | Path,
        *,
        base_url: str = "/media",
        fetch_timeout_seconds: float = 30.0,
        max_fetch_bytes: int | None = None,
        allowed_hosts: list[str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.root_dir = Path(root_dir).resolve()
        self.base_url = base_url.rstrip("/")
        self._fetch_timeout = fetch_timeout_seconds
        self._max_fetch_bytes = max_fetch_bytes
        self._allowed_hosts = {host.lower() for host in allowed_hosts or []}
        self._transport = transport

    def _path_for(self, relative: str) -> Path:
        path = (self.root_dir / relative).resolve()
        if not path.is_relative_to(self.root_dir):
            raise ValidationAppError(
                code="media_invalid_path",
                message="Media path escapes the media directory",
            )
        return path

    async def upload(
        self,
        data: bytes,
        *,
        folder: str,
        public_id: str,
        content_type: str = "image/png",
    ) -> str:
        extension = _EXTENSIONS.get(content_type, "bin")
        name = f"{_UNSAFE_NAME_CHARS.sub('-', public_id)}.{extension}"
        relative = f"{folder}/{name}"
        path = self._path_for(relative)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)

        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, _write)

        logger.info(
            "media.uploaded",
            extra={"folder": folder, "size_bytes": len(data), "content_type": content_type},
        )
        return f"{self.base_url}/{relative}"

    async def fetch(self, url: str) -> bytes:
        if url.startswith(f"{self.base_url}/"):
            path = self._path_for(url[len(self.base_url) + 1:])
            loop = asyncio.get_running_loop()
            try:
                return await loop.run_in_executor(None, path.read_bytes)
            except FileNotFoundError as exc:
                raise StorageAppError(
                    code="media_not_found",
                    message="Referenced image does not exist",
                ) from exc

        parts = urlsplit(url)
        if parts.scheme not in ("http", "https"):
            raise ValidationAppError(
                code="media_invalid_url",
                message="Image URL must be a media path or an http(s) URL",
            )
        self._check_host(parts.hostname or "")

        try:
            async with httpx.AsyncClient(
                timeout=self._fetch_timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                async with client.stream("GET", url) as response:
                    response.raise_for_status()
                    # Final host after redirects
                    self._check_host(response.url.host)
                    return await self._read_capped(response)
        except httpx.HTTPError as exc:
            logger.warning(
                "media.fetch_failed",
                extra={"error_type": type(exc).__name__},
            )
            raise StorageAppError(
                code="media_fetch_failed",
                message="Failed to fetch image",
            ) from exc

    def _check_host(self, host: str) -> None:
        if self._allowed_hosts and host.lower() not in self._allowed_hosts:
            raise ValidationAppError(
                code="media_host_not_allowed",
                message="Image host is not allowed",
                details={"host": host},
            )

    async def _read_capped(self, response: httpx.Response) -> bytes:
        chunks: list[bytes] = []
        received = 0
        async for chunk in response.aiter_bytes():
            received += len(chunk)
            if self._max_fetch_bytes is not None and received > self._max_fetch_bytes:
                logger.warning("media.fetch_too_large", extra={"limit_bytes": self._max_fetch_bytes})
                raise ValidationAppError(
                    code="media_too_large",
                    message="Remote image exceeds the maximum size",
                    details={"limit_bytes": self._max_fetch_bytes},
                )
            chunks.append(chunk)
        return b"".join(chunks)

    def thumbnail_url(self, image_url: str) -> str:
        return image_url
