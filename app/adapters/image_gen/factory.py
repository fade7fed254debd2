"""Factory for image generator instances."""

from app.adapters.image_gen.base import AbstractImageGenerator
from app.adapters.image_gen.openai_client import OpenAIImageGenerator
from app.core.config import settings
from app.core.errors import ValidationAppError


def create_image_generator() -> AbstractImageGenerator:
    """Instantiate the configured image generation provider.

    Raises:
        ValidationAppError: If provider-specific requirements are not met.
    """
    provider = settings.image.provider.lower()

    if provider == "openai":
        if not settings.image.api_key:
            raise ValidationAppError(
                code="image_missing_api_key",
                message="OpenAI provider requires IMAGE_API_KEY environment variable",
            )
        return OpenAIImageGenerator(
            api_key=settings.image.api_key,
            model=settings.image.model,
            base_url=settings.image.base_url,
            size=settings.image.size,
            timeout_seconds=settings.image.timeout_seconds,
        )

    raise ValidationAppError(
        code="image_unknown_provider",
        message=f"Unknown image provider: '{provider}'. Supported providers: openai",
    )
