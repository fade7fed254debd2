"""Image generation adapter layer."""

from app.adapters.image_gen.base import AbstractImageGenerator
from app.adapters.image_gen.factory import create_image_generator
from app.adapters.image_gen.openai_client import OpenAIImageGenerator

__all__ = [
    "AbstractImageGenerator",
    "OpenAIImageGenerator",
    "create_image_generator",
]
