"""Pydantic schemas for the per-user gallery."""

from __future__ import annotations

from pydantic import Field

from app.schemas.common import CamelModel, UtcTimestamp


class SaveImageRequest(CamelModel):
    """Fields supplied when saving a generated result.

    The fabric fields are a snapshot: later catalog edits do not touch saved
    gallery entries.
    """

    image_url: str = Field(..., min_length=1, description="Generated image URL.")
    original_url: str = Field(..., min_length=1, description="Uploaded sofa photo URL.")
    fabric_id: str = Field(..., min_length=1)
    fabric_name: str = Field(..., min_length=1)
    fabric_thumbnail_url: str = Field(..., min_length=1)


class GalleryImage(CamelModel):
    """Saved result; immutable once created."""

    id: str
    image_url: str
    original_url: str
    fabric_id: str
    fabric_name: str
    fabric_thumbnail_url: str
    created_at: UtcTimestamp


class UserGallery(CamelModel):
    """Stored gallery record at ``gallery:<userId>``; images are newest first."""

    user_id: str
    images: list[GalleryImage] = Field(default_factory=list)


class GalleryResponse(CamelModel):
    images: list[GalleryImage]
    count: int
    max_allowed: int


class SaveImageResponse(CamelModel):
    success: bool
    image: GalleryImage | None = None
    error: str | None = None


class DeleteImageRequest(CamelModel):
    image_id: str = Field(..., min_length=1)


class DeleteImageResponse(CamelModel):
    success: bool
    remaining_count: int
