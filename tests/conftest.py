"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It points the app at the testing environment (in-memory KV, throwaway media
directory) before anything imports the settings object.
"""

import os
import tempfile
from datetime import datetime, timezone

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

# Set default env vars that all tests might need
os.environ.setdefault("KV_BACKEND", "memory")
os.environ.setdefault("IMAGE_PROVIDER", "openai")
os.environ.setdefault("IMAGE_API_KEY", "test-image-key-123")
os.environ.setdefault("APP_ADMIN_KEY_REQUIRED", "true")
os.environ.setdefault("APP_ADMIN_API_KEYS", "test-admin-key-123,test-admin-key-456")
os.environ.setdefault("MEDIA_ROOT_DIR", tempfile.mkdtemp(prefix="sofa-media-"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from app.adapters.image_gen.base import AbstractImageGenerator
from app.adapters.kv.in_memory import InMemoryKVClient
from app.adapters.media.local import LocalMediaStore
from app.api.dependencies import get_image_generator, get_kv_client, get_media_store
from app.core.app_factory import create_app

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32
WEBP_BYTES = b"RIFF\x24\x00\x00\x00WEBPVP8 " + b"\x00" * 20

# 2026-10-19T15:00:00Z
NOON_ISH = datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc).timestamp()

ADMIN_HEADERS = {"X-Admin-Key": "test-admin-key-123"}


class MutableClock:
    """Callable clock tests can move forward."""

    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeImageGenerator(AbstractImageGenerator):
    """Records calls and returns canned bytes (or raises)."""

    def __init__(self, result: bytes = PNG_BYTES, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[tuple[str, list[bytes]]] = []

    async def generate(self, prompt: str, images: list[bytes]) -> bytes:
        self.calls.append((prompt, images))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock(NOON_ISH)


@pytest.fixture
def kv(clock: MutableClock) -> InMemoryKVClient:
    return InMemoryKVClient(clock=clock)


@pytest.fixture
def media_store(tmp_path) -> LocalMediaStore:
    return LocalMediaStore(tmp_path / "media", base_url="/media")


@pytest.fixture
def image_generator() -> FakeImageGenerator:
    return FakeImageGenerator()


@pytest.fixture
def app(kv, media_store, image_generator):
    """Fresh application with adapters replaced by in-process fakes."""
    application = create_app()
    application.dependency_overrides[get_kv_client] = lambda: kv
    application.dependency_overrides[get_media_store] = lambda: media_store
    application.dependency_overrides[get_image_generator] = lambda: image_generator
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    """Create FastAPI test client."""
    return TestClient(app)
