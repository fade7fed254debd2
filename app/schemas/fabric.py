"""Pydantic schemas for the fabric catalog."""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from app.schemas.common import CamelModel, UtcTimestamp


class FabricCategory(str, Enum):
    COTTON = "cotton"
    VELVET = "velvet"
    LINEN = "linen"
    LEATHER = "leather"
    MICROFIBER = "microfiber"
    WOOL = "wool"
    SYNTHETIC = "synthetic"
    PATTERNED = "patterned"

    @property
    def label(self) -> str:
        return self.value.capitalize()


DEFAULT_COLOR_HEX = "#808080"


class Fabric(CamelModel):
    """Catalog entry stored at ``fabric:<id>``.

    ``slug`` is a display identifier only; it is not checked for uniqueness.
    """

    id: str
    name: str
    slug: str
    category: FabricCategory
    description: str
    image_url: str
    thumbnail_url: str
    color_hex: str = DEFAULT_COLOR_HEX
    tags: list[str] = Field(default_factory=list)
    is_active: bool = True
    sort_order: int = 0
    created_at: UtcTimestamp
    updated_at: UtcTimestamp


class FabricCreate(CamelModel):
    """Admin input for a new fabric (image URLs come from the media upload)."""

    name: str = Field(..., min_length=1)
    category: FabricCategory
    description: str = Field(..., min_length=1)
    color_hex: str = DEFAULT_COLOR_HEX
    tags: list[str] = Field(default_factory=list)
    is_active: bool = True
    sort_order: int = 0


class FabricUpdate(CamelModel):
    """Partial update; only fields explicitly sent are applied."""

    name: str | None = Field(None, min_length=1)
    category: FabricCategory | None = None
    description: str | None = None
    color_hex: str | None = None
    tags: list[str] | None = None
    is_active: bool | None = None
    sort_order: int | None = None
    image_url: str | None = None
    thumbnail_url: str | None = None


class FabricListResponse(CamelModel):
    fabrics: list[Fabric]


class FabricResponse(CamelModel):
    fabric: Fabric


class FabricMutationResponse(CamelModel):
    success: bool
    fabric: Fabric | None = None
