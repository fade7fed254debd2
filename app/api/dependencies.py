"""FastAPI dependency providers for services and adapters.

Instances are cached in-module so state (and HTTP connection pools) survive
across requests. Tests replace any provider via ``app.dependency_overrides``.
"""

from __future__ import annotations

import logging

from fastapi import Depends

from app.adapters.image_gen.base import AbstractImageGenerator
from app.adapters.image_gen.factory import create_image_generator
from app.adapters.kv.base import AbstractKVClient
from app.adapters.kv.factory import create_kv_client
from app.adapters.media.base import AbstractMediaStore
from app.adapters.media.local import LocalMediaStore
from app.core.config import settings
from app.services.fabric_catalog import FabricCatalog
from app.services.gallery_store import GalleryStore
from app.services.rate_limiter import RateLimiter
from app.services.visualization_service import VisualizationService

logger = logging.getLogger(__name__)


_kv_client: AbstractKVClient | None = None
_media_store: AbstractMediaStore | None = None
_image_generator: AbstractImageGenerator | None = None
_limiter: RateLimiter | None = None
_limiter_config: tuple[int, int] | None = None


def get_kv_client() -> AbstractKVClient:
    global _kv_client
    if _kv_client is None:
        _kv_client = create_kv_client()
        logger.info("kv.client_created", extra={"backend": settings.kv.backend})
    return _kv_client


def get_media_store() -> AbstractMediaStore:
    global _media_store
    if _media_store is None:
        _media_store = LocalMediaStore(
            settings.media.root_dir,
            base_url=settings.media.base_url,
            fetch_timeout_seconds=settings.media.fetch_timeout_seconds,
            max_fetch_bytes=settings.app.max_upload_size_mb * 1024 * 1024,
            allowed_hosts=[
                host.strip()
                for host in (settings.media.allowed_fetch_hosts or "").split(",")
                if host.strip()
            ],
        )
    return _media_store


def get_image_generator() -> AbstractImageGenerator:
    # Built lazily so the API starts without image credentials
    global _image_generator
    if _image_generator is None:
        _image_generator = create_image_generator()
    return _image_generator


def get_rate_limiter(kv: AbstractKVClient = Depends(get_kv_client)) -> RateLimiter:
    """Return the process-wide rate limiter.

    Rebuilt when the configured daily limit or the KV client changes.
    """
    global _limiter, _limiter_config

    config = (settings.app.daily_limit, id(kv))

    if _limiter is None or _limiter_config != config:
        _limiter = RateLimiter(kv, daily_limit=settings.app.daily_limit)
        _limiter_config = config

    return _limiter


def get_gallery_store(kv: AbstractKVClient = Depends(get_kv_client)) -> GalleryStore:
    return GalleryStore(kv)


def get_fabric_catalog(kv: AbstractKVClient = Depends(get_kv_client)) -> FabricCatalog:
    return FabricCatalog(kv)


def get_visualization_service(
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    catalog: FabricCatalog = Depends(get_fabric_catalog),
    generator: AbstractImageGenerator = Depends(get_image_generator),
    media: AbstractMediaStore = Depends(get_media_store),
) -> VisualizationService:
    return VisualizationService(
        rate_limiter=rate_limiter,
        catalog=catalog,
        generator=generator,
        media=media,
    )


async def close_clients() -> None:
    """Release adapter resources on application shutdown."""
    global _kv_client
    if _kv_client is not None:
        await _kv_client.aclose()
        _kv_client = None
