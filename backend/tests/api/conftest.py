"""API test fixtures — FastAPI app with an injected repository and a fake media host.

Invariants:
    - Every test gets a fresh app, a fresh in-memory repository and a fresh limiter
    - The media client is an AsyncMock; no request leaves the process
    - Rate limiting is off unless a test builds its own app with it enabled

Design Decisions:
    - app.state injection over dependency_overrides: the lifespan does not run under
      ASGITransport, and routes read the repository from app.state
"""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from roster.config import Settings
from roster.infrastructure.memory_repository import InMemoryStudentRepository
from roster.main import create_app


def _build_app(repository=None, media_client=None, **overrides):
    settings = Settings(**{
        "storage_backend": "memory",
        "rate_limit_enabled": False,
        "static_dir": "__no_static__",
        **overrides,
    })
    app = create_app(settings)
    app.state.repository = repository or InMemoryStudentRepository()
    app.state.media_client = media_client
    return app


@pytest.fixture
def build_app():
    return _build_app


@pytest.fixture
def media_client():
    client = AsyncMock()
    client.upload.return_value = "https://res.test/upload.png"
    return client


@pytest.fixture
def repository():
    return InMemoryStudentRepository()


@pytest.fixture
def app(repository, media_client):
    return _build_app(repository, media_client)


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
