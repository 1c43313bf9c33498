"""Pytest configuration and shared fixtures."""

import io
import random
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from filedrop.api.dependencies import get_object_store, get_settings
from filedrop.core.config import Settings
from filedrop.main import app
from filedrop.storage.base import StoreConfig
from filedrop.storage.memory import InMemoryObjectStore
from filedrop.storage.r2 import R2ObjectStore

FIXED_NOW = datetime(2024, 1, 1, 12, 0, 0, 123000, tzinfo=timezone.utc)
FIXED_NOW_MS = 1704110400123


def _encode(image: Image.Image, fmt: str, **params) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format=fmt, **params)
    return buffer.getvalue()


def _gradient(size: tuple[int, int] = (64, 48)) -> Image.Image:
    image = Image.new("RGB", size)
    image.putdata([(x * 4 % 256, y * 5 % 256, (x + y) % 256) for y in range(size[1]) for x in range(size[0])])
    return image


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def jpeg_bytes() -> bytes:
    return _encode(_gradient(), "JPEG", quality=95)


@pytest.fixture
def png_bytes() -> bytes:
    return _encode(_gradient(), "PNG", compress_level=0)


@pytest.fixture
def webp_bytes() -> bytes:
    return _encode(_gradient(), "WEBP", quality=95)


@pytest.fixture(scope="session")
def large_png_bytes() -> bytes:
    """A ~2 MB PNG of incompressible noise."""
    side = 820
    noise = random.Random(0).randbytes(side * side * 3)
    return _encode(Image.frombytes("RGB", (side, side), noise), "PNG")


@pytest.fixture
def store_config() -> StoreConfig:
    return StoreConfig(
        account_id="test-account",
        access_key_id="test-access-key",
        secret_access_key="test-secret-key",
        bucket_name="test-bucket",
        custom_domain="files.example.com",
    )


@pytest.fixture
def memory_store(store_config) -> InMemoryObjectStore:
    return InMemoryObjectStore(store_config)


@pytest.fixture
def unconfigured_store() -> R2ObjectStore:
    return R2ObjectStore(StoreConfig())


@pytest.fixture
def test_settings() -> Settings:
    return Settings(ENV="local", STORAGE_BACKEND="memory", MAX_UPLOAD_MB=5)


@pytest.fixture
def override_dependencies(test_settings):
    """Install dependency overrides; call with the store to serve."""

    def install(store, settings: Settings | None = None):
        app.dependency_overrides[get_settings] = lambda: settings or test_settings
        app.dependency_overrides[get_object_store] = lambda: store

    yield install
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)
