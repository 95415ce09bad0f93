"""Route test fixtures — mock document store + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory users collection (mongomock-motor)
    - get_users_collection dependency overridden; lifespan never runs, so no real store is dialed
    - raise_app_exceptions=False: unhandled errors surface as the 500 envelope, not as test errors

Design Decisions:
    - mongomock-motor: fast, no external dependency, speaks the motor API the repository uses
"""

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from directory_api.infrastructure.database import get_users_collection
from directory_api.main import app


@pytest.fixture
def users_collection():
    return AsyncMongoMockClient()["directory_test"]["users"]


@pytest.fixture
async def client(users_collection):
    """FastAPI test client with the collection dependency overridden."""
    app.dependency_overrides[get_users_collection] = lambda: users_collection

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def ann_lee():
    return {
        "name": "Ann Lee",
        "address": "1 Main St",
        "phoneNumber": "5551234567",
        "companyName": "Acme",
    }
