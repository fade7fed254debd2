"""OpenAI image edit adapter."""

import base64
from typing import Any

from openai import AsyncOpenAI

from app.adapters.image_gen.base import AbstractImageGenerator
from app.core.errors import ImageGenerationAppError
from app.utils.file_validators import detect_image_type


class OpenAIImageGenerator(AbstractImageGenerator):
    """Client for OpenAI image edits returning base64 image data.

    Uses the official OpenAI Python SDK with async support.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        size: str = "auto",
        timeout_seconds: float = 120.0,
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: OpenAI API key for authentication.
            model: Image model name (e.g., "gpt-image-1").
            base_url: Optional custom base URL for OpenAI API.
            size: Output size passed to the edit endpoint.
            timeout_seconds: Timeout for requests in seconds.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.model = model
        self.size = size

    @staticmethod
    def _as_upload(index: int, data: bytes) -> tuple[str, bytes, str]:
        image_type = detect_image_type(data) or "png"
        return (f"reference-{index}.{image_type}", data, f"image/{image_type}")

    async def generate(self, prompt: str, images: list[bytes]) -> bytes:
        """Edit the reference images according to prompt.

        Raises:
            ImageGenerationAppError: If the API call fails or returns no image.
        """
        if not images:
            raise ImageGenerationAppError(
                code="image_generation_no_input",
                message="At least one reference image is required",
            )

        request_params: dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "image": [self._as_upload(i, data) for i, data in enumerate(images)],
            "size": self.size,
        }

        try:
            response = await self.client.images.edit(**request_params)
        except Exception as exc:
            raise ImageGenerationAppError(
                code="image_generation_failed",
                message="Image generation provider returned an error",
                details={"provider": "openai", "model": self.model},
            ) from exc

        encoded = response.data[0].b64_json if response.data else None
        if not encoded:
            raise ImageGenerationAppError(
                code="image_generation_empty",
                message="No image was generated. Please try again.",
                details={"provider": "openai", "model": self.model},
            )

        return base64.b64decode(encoded)
