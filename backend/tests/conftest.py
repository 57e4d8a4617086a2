"""
Protofolio Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession for service unit tests (no DB)
    ├── test_settings:   Settings pointing at a throwaway SQLite file
    ├── database:        Connected Database context object with schema created
    ├── app:             FastAPI app with `database` published on app.state
    ├── test_client:     HTTPX AsyncClient routed straight into the app
    └── record_payload:  Factory for valid POST/PUT bodies
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep module-level `protofolio.main.app` from picking up a developer's .env
os.environ.setdefault("LOG_LEVEL", "WARNING")

from protofolio.config import Settings  # noqa: E402
from protofolio.database import Database  # noqa: E402
from protofolio.main import create_app  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_record(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = record
            result = await record_service.get_record(mock_db_session, record_id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def test_settings(tmp_path):
    """Settings for a fresh SQLite database file per test."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'protofolio_test.db'}",
        auto_create_schema=True,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    """Connected Database with tables created; disposed after the test."""
    db = Database(test_settings)
    await db.connect()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def app(test_settings, database):
    """
    Application wired to the test database.

    ASGITransport does not run the lifespan, so the fixture publishes the
    Database the same way the lifespan handler would.
    """
    application = create_app(test_settings)
    application.state.database = database
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def record_payload():
    """Factory for valid record bodies; keyword arguments override fields."""

    def _make(**overrides):
        payload = {
            "title": "Onboarding Flow",
            "description": "Three-step onboarding for the mobile app",
            "externalUrl": "https://www.figma.com/proto/AbC123/Onboarding",
            "category": "mobile-app",
            "tags": "onboarding, mobile",
        }
        payload.update(overrides)
        return payload

    return _make
