"""Upload validation for sofa photos and fabric swatches."""
from __future__ import annotations

import logging

from fastapi import HTTPException, UploadFile

from app.core.config import settings
from app.utils.file_validators import (
    ImageType,
    get_image_type_from_mime,
    validate_image_signature,
)

logger = logging.getLogger(__name__)

INVALID_TYPE_MESSAGE = "Invalid file type. Please upload a JPEG, PNG, or WebP image."


async def read_upload_file_limited(file: UploadFile) -> bytes:
    """Read an uploaded file in chunks enforcing the max size limit.

    Uses file.size if available (multipart headers), falls back to chunked
    reading with enforcement.

    Raises:
        HTTPException: 413 if the file exceeds the configured size limit.
    """
    max_bytes = settings.app.max_upload_size_mb * 1024 * 1024
    too_large = f"File too large. Maximum size is {settings.app.max_upload_size_mb}MB."

    file_size = getattr(file, "size", None)

    if file_size is not None and file_size > max_bytes:
        logger.warning(
            "file_validation.rejected_by_header",
            extra={"file_size": file_size, "max_bytes": max_bytes},
        )
        raise HTTPException(status_code=413, detail=too_large)

    size = 0
    chunks: list[bytes] = []

    while True:
        chunk = await file.read(8192)
        if not chunk:
            break

        size += len(chunk)
        if size > max_bytes:
            logger.warning(
                "file_validation.rejected_by_chunked_read",
                extra={"size": size, "max_bytes": max_bytes},
            )
            raise HTTPException(status_code=413, detail=too_large)
        chunks.append(chunk)

    return b"".join(chunks)


async def read_image_upload(file: UploadFile) -> tuple[bytes, ImageType]:
    """Read an image upload, enforcing type, signature and size.

    Returns:
        Tuple of (image bytes, detected image type).

    Raises:
        HTTPException: 400 for unsupported or spoofed files, 413 when too large.
    """
    image_type = get_image_type_from_mime(file.content_type)
    if image_type is None:
        logger.warning(
            "file_validation.unsupported_type",
            extra={"content_type": file.content_type},
        )
        raise HTTPException(status_code=400, detail=INVALID_TYPE_MESSAGE)

    data = await read_upload_file_limited(file)

    if not data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")

    if not validate_image_signature(data, image_type):
        raise HTTPException(status_code=400, detail=INVALID_TYPE_MESSAGE)

    return data, image_type
