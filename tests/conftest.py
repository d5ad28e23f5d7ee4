from datetime import date

import httpx
import pytest
from fastapi.testclient import TestClient

from config import AppConfig
from images import ImageService
from main import create_app
from store import ContentStore

TODAY = date(2026, 1, 15)
FALLBACK = "https://example.com/fallback.jpg"


def ok_image_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"predictions": [{"bytesBase64Encoded": "aGVsbG8="}]})


@pytest.fixture()
def config() -> AppConfig:
    return AppConfig(
        log_level="DEBUG",
        image_api_key="test-key",
        image_api_base_url="https://images.test/v1beta",
        image_model="imagen-test",
        image_timeout_seconds=5.0,
        fallback_image_url=FALLBACK,
        max_party_size=20,
    )


@pytest.fixture()
def store() -> ContentStore:
    return ContentStore(today=lambda: TODAY, fallback_image=FALLBACK)


@pytest.fixture()
def images(config) -> ImageService:
    return ImageService(config, transport=httpx.MockTransport(ok_image_handler))


@pytest.fixture()
def client(config, store, images) -> TestClient:
    return TestClient(create_app(config, store=store, images=images))
