"""
AssetVault Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:      AsyncMock session for store-level unit tests
    ├── token_service:        TokenService with a fixed test secret
    ├── database:             Database on a throwaway SQLite file, tables created
    ├── app:                  create_app() wired to that database
    ├── test_client:          HTTPX AsyncClient over ASGITransport
    ├── auth_headers:         Bearer header for a freshly registered user
    └── sample_asset_payload: A valid POST /api/v1/assets body
"""

import os

# Override settings for testing BEFORE any assetvault imports; the settings
# singleton and the module-level app are built at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./assetvault_test.db"
os.environ["JWT_SECRET"] = "test-secret-that-is-at-least-32-characters"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from assetvault.config import Settings
from assetvault.database import Database
from assetvault.main import create_app
from assetvault.services.auth_service import TokenService

TEST_SECRET = os.environ["JWT_SECRET"]


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = asset
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def token_service():
    return TokenService(
        secret=TEST_SECRET,
        issuer="assetvault",
        audience="assetvault-clients",
    )


@pytest_asyncio.fixture
async def database(tmp_path):
    """A real Database on a per-test SQLite file with all tables created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'assetvault.db'}")
    await db.create_schema()
    yield db
    await db.dispose()


@pytest.fixture
def app(database, token_service):
    settings = Settings(database_url=database.url, jwt_secret=TEST_SECRET)
    return create_app(settings=settings, database=database, token_service=token_service)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server).

    ASGITransport does not run the lifespan; the `database` fixture has
    already created the schema.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def credentials():
    return {"username": "designer01", "password": "correct-horse"}


@pytest_asyncio.fixture
async def auth_headers(test_client, credentials):
    """Register + login, return an Authorization header for /api/v1 calls."""
    response = await test_client.post("/register", json=credentials)
    assert response.status_code == 201
    response = await test_client.post("/login", json=credentials)
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def sample_asset_payload():
    return {
        "title": "Low-poly Forest Pack",
        "description": "120 trees and rocks, mobile friendly",
        "images": [
            {"url": "https://cdn.example.com/forest/cover.png", "height": 720, "width": 1280},
            {"url": "https://cdn.example.com/forest/detail.png", "height": 512, "width": 512, "type": "png"},
        ],
        "type": "3D Asset",
        "tags": [
            {"name": "nature", "path": "/tags/nature"},
            {"name": "low-poly", "path": "/tags/low-poly"},
        ],
        "category": "Unity",
    }
