"""API test fixtures — FastAPI test client over an in-memory collection.

Invariants:
    - Every test gets a fresh MockCollection
    - get_user_repository is overridden to wrap the mock in the real
      MongoUserRepository, so routes and repository are exercised together
    - The lifespan is not run (ASGITransport sends no lifespan events): no
      store client is ever created
"""

import pytest
from httpx import ASGITransport, AsyncClient

from user_api.core.domain_types import ErrorMode
from user_api.infrastructure.database import get_user_repository
from user_api.infrastructure.user_repository import MongoUserRepository
from user_api.main import app
from tests.factories import PAULA
from tests.mock_mongo import MockCollection


@pytest.fixture
def collection():
    return MockCollection()


@pytest.fixture
async def client(collection, monkeypatch):
    """Test client in the default (compat) error mode."""
    app.dependency_overrides[get_user_repository] = (
        lambda: MongoUserRepository(collection)
    )
    monkeypatch.setattr(app.state, "error_mode", ErrorMode.COMPAT)

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def strict_client(client, monkeypatch):
    """Same client, rendering errors with proper status codes."""
    monkeypatch.setattr(app.state, "error_mode", ErrorMode.STRICT)
    return client


@pytest.fixture
async def created_user(client):
    """A user created through the API."""
    res = await client.post("/api/users", json=PAULA)
    return res.json()
