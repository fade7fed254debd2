from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from app.adapters.media.base import AbstractMediaStore
from app.api.dependencies import get_fabric_catalog, get_media_store
from app.core.auth import verify_admin_key
from app.core.file_validation import read_image_upload
from app.schemas.fabric import (
    DEFAULT_COLOR_HEX,
    FabricCategory,
    FabricCreate,
    FabricListResponse,
    FabricMutationResponse,
    FabricResponse,
    FabricUpdate,
)
from app.services.fabric_catalog import FabricCatalog, slugify

router = APIRouter(tags=["Fabrics"])


def _parse_tags(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


@router.get("/fabrics", response_model=FabricListResponse)
async def list_fabrics(
    category: FabricCategory | None = None,
    catalog: FabricCatalog = Depends(get_fabric_catalog),
) -> FabricListResponse:
    """List active fabrics, optionally restricted to one category."""
    if category is not None:
        fabrics = await catalog.get_fabrics_by_category(category)
    else:
        fabrics = await catalog.get_active_fabrics()
    return FabricListResponse(fabrics=fabrics)


@router.get("/fabrics/categories")
def list_categories() -> dict:
    """Category values with display labels for the admin form."""
    return {
        "categories": [
            {"value": category.value, "label": category.label}
            for category in FabricCategory
        ]
    }


@router.post(
    "/fabrics",
    response_model=FabricMutationResponse,
    dependencies=[Depends(verify_admin_key)],
)
async def create_fabric(
    name: str = Form(..., min_length=1),
    category: FabricCategory = Form(...),
    description: str = Form(..., min_length=1),
    color_hex: str | None = Form(None, alias="colorHex"),
    tags: str | None = Form(None, description="Comma-separated tags"),
    sort_order: int = Form(0, alias="sortOrder"),
    image: UploadFile = File(..., description="Fabric swatch (JPEG, PNG or WebP)"),
    catalog: FabricCatalog = Depends(get_fabric_catalog),
    media: AbstractMediaStore = Depends(get_media_store),
) -> FabricMutationResponse:
    """Upload a swatch and create a catalog entry (admin only)."""
    data, image_type = await read_image_upload(image)
    image_url, thumbnail_url = await media.upload_fabric_image(
        data,
        slugify(name),
        f"image/{image_type}",
    )

    fabric = await catalog.create_fabric(
        FabricCreate(
            name=name,
            category=category,
            description=description,
            color_hex=color_hex or DEFAULT_COLOR_HEX,
            tags=_parse_tags(tags),
            is_active=True,
            sort_order=sort_order,
        ),
        image_url,
        thumbnail_url,
    )
    return FabricMutationResponse(success=True, fabric=fabric)


@router.get("/fabrics/{fabric_id}", response_model=FabricResponse)
async def get_fabric(
    fabric_id: str,
    catalog: FabricCatalog = Depends(get_fabric_catalog),
) -> FabricResponse:
    fabric = await catalog.get_fabric(fabric_id)
    if fabric is None:
        raise HTTPException(status_code=404, detail="Fabric not found")
    return FabricResponse(fabric=fabric)


@router.put(
    "/fabrics/{fabric_id}",
    response_model=FabricMutationResponse,
    dependencies=[Depends(verify_admin_key)],
)
async def update_fabric(
    fabric_id: str,
    updates: FabricUpdate,
    catalog: FabricCatalog = Depends(get_fabric_catalog),
) -> FabricMutationResponse:
    """Apply a partial update (admin only). Moving category re-indexes the fabric."""
    fabric = await catalog.update_fabric(fabric_id, updates)
    if fabric is None:
        raise HTTPException(status_code=404, detail="Fabric not found")
    return FabricMutationResponse(success=True, fabric=fabric)


@router.post(
    "/fabrics/{fabric_id}/toggle",
    response_model=FabricMutationResponse,
    dependencies=[Depends(verify_admin_key)],
)
async def toggle_fabric(
    fabric_id: str,
    catalog: FabricCatalog = Depends(get_fabric_catalog),
) -> FabricMutationResponse:
    """Flip the fabric's active flag (admin only)."""
    fabric = await catalog.toggle_fabric_active(fabric_id)
    if fabric is None:
        raise HTTPException(status_code=404, detail="Fabric not found")
    return FabricMutationResponse(success=True, fabric=fabric)


@router.delete(
    "/fabrics/{fabric_id}",
    response_model=FabricMutationResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(verify_admin_key)],
)
async def delete_fabric(
    fabric_id: str,
    catalog: FabricCatalog = Depends(get_fabric_catalog),
) -> FabricMutationResponse:
    """Delete a fabric and its index entries (admin only).

    Gallery entries keep their own copy of the fabric name and thumbnail.
    """
    if not await catalog.delete_fabric(fabric_id):
        raise HTTPException(status_code=404, detail="Fabric not found")
    return FabricMutationResponse(success=True)
