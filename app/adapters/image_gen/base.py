from abc import ABC, abstractmethod


class AbstractImageGenerator(ABC):
	"""Interface for models that edit images from a text instruction."""

	@abstractmethod
	async def generate(self, prompt: str, images: list[bytes]) -> bytes:
		"""Produce a new image from reference images and an instruction.

		Args:
			prompt: Editing instruction for the model.
			images: Reference images in order (sofa photo first, then fabric swatch).

		Returns:
			bytes: Encoded image (PNG/JPEG) returned by the model.

		Raises:
			ImageGenerationAppError: If the provider call fails or returns no image.
		"""
		...
