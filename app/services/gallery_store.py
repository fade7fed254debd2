"""Per-user gallery of saved visualization results.

Each user owns one ``gallery:<userId>`` record holding at most
``MAX_GALLERY_SIZE`` images, newest first. A full gallery rejects new saves
(the caller asks the user to delete something); nothing is evicted
automatically.

Mutations are whole-record read-modify-write without compare-and-swap, so
concurrent saves for the same user can overshoot the cap or drop one of the
writes.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Callable

from app.adapters.kv.base import AbstractKVClient, KVKeys
from app.core.logging import hash_identifier
from app.schemas.gallery import GalleryImage, SaveImageRequest, UserGallery
from app.utils.timestamps import utc_from_epoch

logger = logging.getLogger(__name__)

MAX_GALLERY_SIZE = 5

GALLERY_FULL = "gallery_full"


@dataclass(frozen=True)
class AddToGalleryResult:
    success: bool
    image: GalleryImage | None = None
    error: str | None = None


@dataclass(frozen=True)
class RemoveFromGalleryResult:
    success: bool
    remaining_count: int


def _new_image_id() -> str:
    return str(uuid.uuid4())


class GalleryStore:
    """Capped, ordered gallery per anonymous user."""

    def __init__(
        self,
        kv: AbstractKVClient,
        *,
        max_size: int = MAX_GALLERY_SIZE,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = _new_image_id,
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be >= 1")

        self._kv = kv
        self._max_size = max_size
        self._clock = clock
        self._id_factory = id_factory

    @property
    def max_size(self) -> int:
        return self._max_size

    async def get_gallery(self, user_id: str) -> UserGallery:
        """Return the user's gallery, or an empty one if none is stored.

        Never writes.
        """
        data = await self._kv.get(KVKeys.gallery(user_id))
        if data is None:
            return UserGallery(user_id=user_id, images=[])
        return UserGallery.model_validate(data)

    async def add_to_gallery(self, user_id: str, image_data: SaveImageRequest) -> AddToGalleryResult:
        """Prepend a new image unless the gallery is already full."""
        gallery = await self.get_gallery(user_id)

        if len(gallery.images) >= self._max_size:
            logger.info(
                "gallery.full",
                extra={"user_hash": hash_identifier(user_id), "count": len(gallery.images)},
            )
            return AddToGalleryResult(success=False, error=GALLERY_FULL)

        image = GalleryImage(
            id=self._id_factory(),
            image_url=image_data.image_url,
            original_url=image_data.original_url,
            fabric_id=image_data.fabric_id,
            fabric_name=image_data.fabric_name,
            fabric_thumbnail_url=image_data.fabric_thumbnail_url,
            created_at=utc_from_epoch(self._clock()),
        )
        gallery.images.insert(0, image)
        await self._kv.set(KVKeys.gallery(user_id), gallery.to_record())

        logger.info(
            "gallery.image_added",
            extra={
                "user_hash": hash_identifier(user_id),
                "image_id": image.id,
                "fabric_id": image.fabric_id,
                "count": len(gallery.images),
            },
        )
        return AddToGalleryResult(success=True, image=image)

    async def remove_from_gallery(self, user_id: str, image_id: str) -> RemoveFromGalleryResult:
        """Drop every image with image_id; unknown ids are a no-op.

        The record is written back even when nothing matched.
        """
        gallery = await self.get_gallery(user_id)
        before = len(gallery.images)
        gallery.images = [image for image in gallery.images if image.id != image_id]
        await self._kv.set(KVKeys.gallery(user_id), gallery.to_record())

        logger.info(
            "gallery.image_removed",
            extra={
                "user_hash": hash_identifier(user_id),
                "image_id": image_id,
                "removed": before - len(gallery.images),
                "count": len(gallery.images),
            },
        )
        return RemoveFromGalleryResult(success=True, remaining_count=len(gallery.images))

    async def get_gallery_image(self, user_id: str, image_id: str) -> GalleryImage | None:
        gallery = await self.get_gallery(user_id)
        return next((image for image in gallery.images if image.id == image_id), None)
