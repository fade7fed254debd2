"""Fabric catalog stored as one record per fabric plus index sets.

Keys:
- ``fabric:<id>``: the fabric record
- ``fabrics:index``: ids of every fabric
- ``fabrics:category:<category>``: ids per category

Index updates and record writes are separate calls. A failure between them
can leave an id in the wrong index, so every read drops ids whose record is
missing.
"""

from __future__ import annotations

import asyncio
import logging
import re
import secrets
import string
import time
import uuid
from typing import Callable

from app.adapters.kv.base import AbstractKVClient, KVKeys
from app.schemas.fabric import Fabric, FabricCategory, FabricCreate, FabricUpdate
from app.utils.timestamps import utc_from_epoch

logger = logging.getLogger(__name__)

SLUG_SUFFIX_LENGTH = 6
_SLUG_ALPHABET = string.ascii_letters + string.digits + "_-"
_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def random_suffix(length: int = SLUG_SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(_SLUG_ALPHABET) for _ in range(length))


def slugify(name: str) -> str:
    """Lowercase name with runs of other characters collapsed to '-'."""
    return _NON_SLUG_CHARS.sub("-", name.lower()).strip("-")


def _new_fabric_id() -> str:
    return str(uuid.uuid4())


class FabricCatalog:
    """CRUD over fabrics with global and per-category index sets."""

    def __init__(
        self,
        kv: AbstractKVClient,
        *,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = _new_fabric_id,
        suffix_factory: Callable[[], str] = random_suffix,
    ) -> None:
        self._kv = kv
        self._clock = clock
        self._id_factory = id_factory
        self._suffix_factory = suffix_factory

    def create_slug(self, name: str) -> str:
        # Not checked against existing slugs; display use only
        return f"{slugify(name)}-{self._suffix_factory()}"

    async def create_fabric(self, data: FabricCreate, image_url: str, thumbnail_url: str) -> Fabric:
        now = utc_from_epoch(self._clock())
        fabric = Fabric(
            id=self._id_factory(),
            name=data.name,
            slug=self.create_slug(data.name),
            category=data.category,
            description=data.description,
            image_url=image_url,
            thumbnail_url=thumbnail_url,
            color_hex=data.color_hex,
            tags=data.tags,
            is_active=data.is_active,
            sort_order=data.sort_order,
            created_at=now,
            updated_at=now,
        )

        await self._kv.set(KVKeys.fabric(fabric.id), fabric.to_record())
        await self._kv.set_add(KVKeys.FABRIC_INDEX, fabric.id)
        await self._kv.set_add(KVKeys.fabrics_by_category(fabric.category.value), fabric.id)

        logger.info(
            "fabric.created",
            extra={"fabric_id": fabric.id, "category": fabric.category.value, "slug": fabric.slug},
        )
        return fabric

    async def get_fabric(self, fabric_id: str) -> Fabric | None:
        data = await self._kv.get(KVKeys.fabric(fabric_id))
        if data is None:
            return None
        return Fabric.model_validate(data)

    async def _load_indexed(self, index_key: str) -> list[Fabric]:
        ids = await self._kv.set_members(index_key)
        if not ids:
            return []

        fabrics = await asyncio.gather(*(self.get_fabric(fabric_id) for fabric_id in ids))
        found = [fabric for fabric in fabrics if fabric is not None]

        dangling = len(ids) - len(found)
        if dangling:
            logger.warning(
                "fabric.dangling_index_entries",
                extra={"index": index_key, "dangling": dangling},
            )

        return sorted(found, key=lambda fabric: fabric.sort_order)

    async def get_all_fabrics(self) -> list[Fabric]:
        """Every indexed fabric, inactive ones included, by sort order."""
        return await self._load_indexed(KVKeys.FABRIC_INDEX)

    async def get_active_fabrics(self) -> list[Fabric]:
        return [fabric for fabric in await self.get_all_fabrics() if fabric.is_active]

    async def get_fabrics_by_category(self, category: FabricCategory) -> list[Fabric]:
        fabrics = await self._load_indexed(KVKeys.fabrics_by_category(FabricCategory(category).value))
        return [fabric for fabric in fabrics if fabric.is_active]

    async def get_fabric_by_slug(self, slug: str) -> Fabric | None:
        return next((f for f in await self.get_all_fabrics() if f.slug == slug), None)

    async def update_fabric(self, fabric_id: str, updates: FabricUpdate) -> Fabric | None:
        """Apply the fields explicitly set on updates.

        Returns:
            The updated fabric, or None if it does not exist.
        """
        existing = await self.get_fabric(fabric_id)
        if existing is None:
            return None

        changes = {
            field: value
            for field, value in updates.model_dump(exclude_unset=True).items()
            if value is not None
        }

        new_category = changes.get("category")
        if new_category is not None and new_category != existing.category:
            # Index sets move before the record is rewritten
            await self._kv.set_remove(KVKeys.fabrics_by_category(existing.category.value), fabric_id)
            await self._kv.set_add(KVKeys.fabrics_by_category(FabricCategory(new_category).value), fabric_id)

        updated = Fabric.model_validate(
            {
                **existing.model_dump(),
                **changes,
                "updated_at": utc_from_epoch(self._clock()),
            }
        )
        await self._kv.set(KVKeys.fabric(fabric_id), updated.to_record())

        logger.info(
            "fabric.updated",
            extra={"fabric_id": fabric_id, "fields": sorted(changes)},
        )
        return updated

    async def delete_fabric(self, fabric_id: str) -> bool:
        """Remove a fabric and its index entries.

        Returns:
            False if the fabric did not exist.
        """
        fabric = await self.get_fabric(fabric_id)
        if fabric is None:
            return False

        await self._kv.set_remove(KVKeys.FABRIC_INDEX, fabric_id)
        await self._kv.set_remove(KVKeys.fabrics_by_category(fabric.category.value), fabric_id)
        await self._kv.delete(KVKeys.fabric(fabric_id))

        logger.info("fabric.deleted", extra={"fabric_id": fabric_id})
        return True

    async def toggle_fabric_active(self, fabric_id: str) -> Fabric | None:
        fabric = await self.get_fabric(fabric_id)
        if fabric is None:
            return None
        return await self.update_fabric(fabric_id, FabricUpdate(is_active=not fabric.is_active))
