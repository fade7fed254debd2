from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse

from app.api.dependencies import get_gallery_store
from app.core.identity import UserIdentity, remember_user, resolve_user
from app.schemas.gallery import (
    DeleteImageRequest,
    DeleteImageResponse,
    GalleryResponse,
    SaveImageRequest,
    SaveImageResponse,
)
from app.services.gallery_store import GalleryStore

router = APIRouter(tags=["Gallery"])


@router.get("/gallery", response_model=GalleryResponse)
async def get_gallery(
    response: Response,
    identity: UserIdentity = Depends(resolve_user),
    store: GalleryStore = Depends(get_gallery_store),
) -> GalleryResponse:
    """List the caller's saved results, newest first."""
    if identity.is_new:
        # Nobody has stored anything under a freshly minted id
        remember_user(response, identity)
        return GalleryResponse(images=[], count=0, max_allowed=store.max_size)

    gallery = await store.get_gallery(identity.user_id)
    return GalleryResponse(
        images=gallery.images,
        count=len(gallery.images),
        max_allowed=store.max_size,
    )


@router.post("/gallery", response_model=SaveImageResponse, response_model_exclude_none=True)
async def save_to_gallery(
    body: SaveImageRequest,
    response: Response,
    identity: UserIdentity = Depends(resolve_user),
    store: GalleryStore = Depends(get_gallery_store),
):
    """Save a generated result.

    Returns 400 with ``error: "gallery_full"`` when the gallery already holds
    the maximum number of images; the client should offer to delete one.
    """
    result = await store.add_to_gallery(identity.user_id, body)

    if not result.success:
        return JSONResponse(
            status_code=400,
            content=SaveImageResponse(success=False, error=result.error).model_dump(
                mode="json", by_alias=True, exclude_none=True
            ),
        )

    remember_user(response, identity)
    return SaveImageResponse(success=True, image=result.image)


@router.delete("/gallery", response_model=DeleteImageResponse)
async def delete_from_gallery(
    body: DeleteImageRequest,
    identity: UserIdentity = Depends(resolve_user),
    store: GalleryStore = Depends(get_gallery_store),
) -> DeleteImageResponse:
    """Remove one image by id. Unknown ids succeed without changes."""
    if identity.is_new:
        raise HTTPException(status_code=404, detail="No gallery found")

    result = await store.remove_from_gallery(identity.user_id, body.image_id)
    return DeleteImageResponse(success=result.success, remaining_count=result.remaining_count)
