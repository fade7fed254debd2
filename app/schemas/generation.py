"""Pydantic schemas for uploads and visualization requests."""

from __future__ import annotations

from pydantic import Field

from app.schemas.common import CamelModel, UtcTimestamp


class GenerationRequest(CamelModel):
    sofa_image_url: str = Field(..., min_length=1, description="URL returned by /api/upload.")
    fabric_id: str = Field(..., min_length=1, description="Catalog id of the chosen fabric.")


class GenerationResponse(CamelModel):
    success: bool
    result_image_url: str
    remaining_generations: int


class RateLimitedResponse(CamelModel):
    error: str = "Daily limit reached"
    reset_at: UtcTimestamp
    remaining_generations: int = 0


class UploadResponse(CamelModel):
    success: bool
    image_url: str
