from __future__ import annotations

from fastapi import APIRouter, Depends, File, Response, UploadFile

from app.adapters.media.base import AbstractMediaStore
from app.api.dependencies import get_media_store
from app.core.file_validation import read_image_upload
from app.core.identity import UserIdentity, remember_user, resolve_user
from app.schemas.generation import UploadResponse

router = APIRouter(tags=["Generation"])


@router.post("/upload", response_model=UploadResponse)
async def upload_sofa_image(
    response: Response,
    file: UploadFile = File(..., description="Sofa photo (JPEG, PNG or WebP)"),
    identity: UserIdentity = Depends(resolve_user),
    media: AbstractMediaStore = Depends(get_media_store),
) -> UploadResponse:
    """Store the user's sofa photo and return its URL for /api/generate.

    Raises:
        HTTPException: 400 for unsupported or spoofed files, 413 when too large.
    """
    data, image_type = await read_image_upload(file)
    image_url = await media.upload_sofa_image(data, identity.user_id, f"image/{image_type}")

    remember_user(response, identity)
    return UploadResponse(success=True, image_url=image_url)
