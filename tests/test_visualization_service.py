"""Tests for the visualization pipeline with fake generator and media store."""

import asyncio

import pytest

from app.adapters.media.base import AbstractMediaStore
from app.core.errors import ImageGenerationAppError, StorageAppError
from app.schemas.fabric import FabricCreate
from app.services.fabric_catalog import FabricCatalog
from app.services.prompts import (
    FALLBACK_MATERIAL,
    build_fabric_replacement_prompt,
    material_description,
)
from app.services.rate_limiter import RateLimiter
from app.services.visualization_service import VisualizationService

from conftest import JPEG_BYTES, PNG_BYTES, FakeImageGenerator


class FakeMediaStore(AbstractMediaStore):
    """Dict-backed media store."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}

    async def upload(self, data, *, folder, public_id, content_type="image/png") -> str:
        url = f"mem://{folder}/{public_id}"
        self.files[url] = data
        return url

    async def fetch(self, url: str) -> bytes:
        if url not in self.files:
            raise StorageAppError(code="media_not_found", message="Referenced image does not exist")
        return self.files[url]

    def thumbnail_url(self, image_url: str) -> str:
        return image_url + "?thumb"


@pytest.fixture
def media() -> FakeMediaStore:
    store = FakeMediaStore()
    store.files["mem://sofa-images/u1"] = JPEG_BYTES
    store.files["mem://fabrics/royal-velvet"] = PNG_BYTES
    return store


@pytest.fixture
def limiter(kv, clock) -> RateLimiter:
    return RateLimiter(kv, daily_limit=5, clock=clock)


@pytest.fixture
def catalog(kv, clock) -> FabricCatalog:
    return FabricCatalog(kv, clock=clock, id_factory=lambda: "fab-1")


@pytest.fixture
def fabric(catalog: FabricCatalog):
    data = FabricCreate(name="Royal Velvet", category="velvet", description="Deep blue velvet")
    return asyncio.run(
        catalog.create_fabric(data, "mem://fabrics/royal-velvet", "mem://fabrics/royal-velvet?thumb")
    )


def _service(limiter, catalog, generator, media) -> VisualizationService:
    return VisualizationService(rate_limiter=limiter, catalog=catalog, generator=generator, media=media)


def test_successful_generation_consumes_quota(limiter, catalog, media, fabric) -> None:
    generator = FakeImageGenerator(result=b"\x89PNG result")
    service = _service(limiter, catalog, generator, media)

    outcome = asyncio.run(service.generate("u1", "mem://sofa-images/u1", fabric.id))

    assert outcome.ok
    assert outcome.remaining_generations == 4
    assert outcome.result_image_url.startswith("mem://generated/u1_")
    assert media.files[outcome.result_image_url] == b"\x89PNG result"

    prompt, images = generator.calls[0]
    assert images == [JPEG_BYTES, PNG_BYTES]
    assert "Royal Velvet" in prompt

    assert asyncio.run(limiter.check_rate_limit("u1")).remaining == 4


def test_rate_limited_user_skips_generation(limiter, catalog, media, fabric) -> None:
    for _ in range(5):
        asyncio.run(limiter.increment_rate_limit("u1"))
    generator = FakeImageGenerator()

    outcome = asyncio.run(_service(limiter, catalog, generator, media).generate("u1", "mem://sofa-images/u1", fabric.id))

    assert outcome.status == "rate_limited"
    assert outcome.remaining_generations == 0
    assert outcome.result_image_url is None
    assert generator.calls == []


def test_unknown_fabric_does_not_consume_quota(limiter, catalog, media) -> None:
    generator = FakeImageGenerator()

    outcome = asyncio.run(_service(limiter, catalog, generator, media).generate("u1", "mem://sofa-images/u1", "nope"))

    assert outcome.status == "fabric_not_found"
    assert generator.calls == []
    assert asyncio.run(limiter.check_rate_limit("u1")).remaining == 5


def test_generator_failure_propagates_without_consuming_quota(limiter, catalog, media, fabric) -> None:
    generator = FakeImageGenerator(
        error=ImageGenerationAppError(code="image_generation_failed", message="boom")
    )

    with pytest.raises(ImageGenerationAppError):
        asyncio.run(_service(limiter, catalog, generator, media).generate("u1", "mem://sofa-images/u1", fabric.id))

    assert asyncio.run(limiter.check_rate_limit("u1")).remaining == 5


def test_missing_sofa_image_propagates(limiter, catalog, media, fabric) -> None:
    generator = FakeImageGenerator()

    with pytest.raises(StorageAppError):
        asyncio.run(_service(limiter, catalog, generator, media).generate("u1", "mem://sofa-images/gone", fabric.id))

    assert generator.calls == []


def test_prompt_mentions_fabric_details(fabric) -> None:
    prompt = build_fabric_replacement_prompt(fabric)

    assert "Royal Velvet" in prompt
    assert "Deep blue velvet" in prompt
    assert material_description("velvet") in prompt
    assert "FIRST image" in prompt and "SECOND image" in prompt


def test_material_description_fallback() -> None:
    assert material_description("tweed") == FALLBACK_MATERIAL
    assert "linen" in material_description("linen")
