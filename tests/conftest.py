"""
Pytest configuration and shared fixtures.
"""
import pytest
from httpx import AsyncClient, ASGITransport
from src.api.main import app, get_activity_source
from src.core.config import Settings, get_settings
from src.infrastructure.gateways.local_mock import LocalMockActivitySource

from factories import make_records


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def source():
    return LocalMockActivitySource(records=make_records(250))


@pytest.fixture
async def client(source, settings):
    """Async HTTP client for testing FastAPI endpoints against an in-memory source."""
    app.dependency_overrides[get_activity_source] = lambda: source
    app.dependency_overrides[get_settings] = lambda: settings
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
