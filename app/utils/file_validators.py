"""Image validation utilities for upload security.

Validates image signatures (magic numbers) so a file renamed or sent with a
spoofed Content-Type is rejected before it reaches media storage.
"""

from __future__ import annotations

import logging
from typing import Literal, Optional, cast

logger = logging.getLogger(__name__)

ImageType = Literal["jpeg", "png", "webp"]

ALLOWED_MIME_TYPES: dict[str, ImageType] = {
    "image/jpeg": "jpeg",
    "image/png": "png",
    "image/webp": "webp",
}


def detect_image_type(data: bytes) -> Optional[ImageType]:
    """Identify a supported image format from its leading bytes.

    Args:
        data: File content as bytes.

    Returns:
        'jpeg', 'png' or 'webp', or None for anything else.
    """
    if data.startswith(b"\xff\xd8\xff"):
        return "jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "png"
    # RIFF container with a WEBP form type at offset 8
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "webp"
    return None


def validate_image_signature(data: bytes, expected_type: ImageType) -> bool:
    """Check that the file's magic number matches the declared type.

    Args:
        data: File content as bytes.
        expected_type: Type derived from the declared MIME type.

    Returns:
        True if the signature matches, False otherwise.
    """
    actual = detect_image_type(data)
    if actual == expected_type:
        return True

    logger.warning(
        "file_signature.invalid",
        extra={
            "expected_type": expected_type,
            "detected_type": actual,
            "actual_prefix": data[:10] if data else "EMPTY",
        },
    )
    return False


def get_image_type_from_mime(mime_type: str | None) -> Optional[ImageType]:
    """Map an allowed MIME type to the internal image type (None if unsupported)."""
    if not mime_type:
        return None
    return cast(Optional[ImageType], ALLOWED_MIME_TYPES.get(mime_type.lower()))
