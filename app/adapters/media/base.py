"""Media store interface.

Uploaded sofa photos, fabric swatches and generated results are kept by a
media store that hands back public URLs. Folder layout:

- ``sofa-images/<userId>_<epochMs>``
- ``fabrics/<fabricSlug>``
- ``generated/<userId>_<epochMs>``
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod

SOFA_FOLDER = "sofa-images"
FABRIC_FOLDER = "fabrics"
GENERATED_FOLDER = "generated"


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class AbstractMediaStore(ABC):
    """Interface for image hosting backends."""

    @abstractmethod
    async def upload(
        self,
        data: bytes,
        *,
        folder: str,
        public_id: str,
        content_type: str = "image/png",
    ) -> str:
        """Store image bytes and return their public URL."""
        raise NotImplementedError

    @abstractmethod
    async def fetch(self, url: str) -> bytes:
        """Download the image behind url (own uploads or remote URLs)."""
        raise NotImplementedError

    @abstractmethod
    def thumbnail_url(self, image_url: str) -> str:
        """URL of a small square rendition of image_url."""
        raise NotImplementedError

    async def upload_sofa_image(self, data: bytes, user_id: str, content_type: str) -> str:
        return await self.upload(
            data,
            folder=SOFA_FOLDER,
            public_id=f"{user_id}_{_epoch_ms()}",
            content_type=content_type,
        )

    async def upload_fabric_image(self, data: bytes, fabric_slug: str, content_type: str) -> tuple[str, str]:
        """Store a fabric swatch.

        Returns:
            Tuple of (image_url, thumbnail_url).
        """
        image_url = await self.upload(
            data,
            folder=FABRIC_FOLDER,
            public_id=fabric_slug,
            content_type=content_type,
        )
        return image_url, self.thumbnail_url(image_url)

    async def upload_generated_image(self, data: bytes, user_id: str) -> str:
        return await self.upload(
            data,
            folder=GENERATED_FOLDER,
            public_id=f"{user_id}_{_epoch_ms()}",
            content_type="image/png",
        )
