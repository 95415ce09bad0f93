"""Document Store Manager tests — startup ping, failure handling and the collection dependency.

Design Decisions:
    - The motor client class is monkeypatched: no test dials a real server
"""

import pytest
from pymongo.errors import ConfigurationError, ServerSelectionTimeoutError

from directory_api.core.errors import StoreUnavailableError
from directory_api.infrastructure import database


class _FakeAdmin:
    def __init__(self, error=None):
        self.error = error

    async def command(self, name):
        if self.error:
            raise self.error
        return {"ok": 1.0}


class _FakeClient:
    ping_error = None
    instances = []

    def __init__(self, uri, **kwargs):
        self.uri = uri
        self.kwargs = kwargs
        self.closed = False
        self.admin = _FakeAdmin(self.ping_error)
        _FakeClient.instances.append(self)

    def __getitem__(self, name):
        return {"users": f"{name}.users"}

    def close(self):
        self.closed = True


@pytest.fixture
def fake_client(monkeypatch):
    _FakeClient.ping_error = None
    _FakeClient.instances = []
    monkeypatch.setattr(database, "AsyncIOMotorClient", _FakeClient)
    monkeypatch.setattr(database, "store_manager", None)
    return _FakeClient


async def test_init_store_pings_and_installs_manager(fake_client):
    manager = await database.init_store("mongodb://db:27017/app", "app", timeout_ms=1500)

    assert database.store_manager is manager
    client = fake_client.instances[0]
    assert client.kwargs == {"tz_aware": True, "serverSelectionTimeoutMS": 1500}
    assert database.get_users_collection() == "app.users"


async def test_unreachable_store_aborts_startup(fake_client):
    fake_client.ping_error = ServerSelectionTimeoutError("connection refused")

    with pytest.raises(StoreUnavailableError) as exc_info:
        await database.init_store("mongodb://db:27017/app", "app")

    assert "connection refused" in exc_info.value.message
    assert database.store_manager is None
    assert fake_client.instances[0].closed


async def test_invalid_uri_aborts_startup(monkeypatch):
    def _reject(uri, **kwargs):
        raise ConfigurationError("bad uri")

    monkeypatch.setattr(database, "AsyncIOMotorClient", _reject)
    monkeypatch.setattr(database, "store_manager", None)

    with pytest.raises(StoreUnavailableError):
        await database.init_store("mongodb://", "app")


async def test_health_check_reports_ping_failure(fake_client):
    manager = await database.init_store("mongodb://db:27017/app", "app")
    manager.client.admin.error = ServerSelectionTimeoutError("gone")
    assert await manager.health_check() is False


async def test_close_store_releases_client(fake_client):
    await database.init_store("mongodb://db:27017/app", "app")
    await database.close_store()
    assert database.store_manager is None
    assert fake_client.instances[0].closed


def test_collection_dependency_requires_init(monkeypatch):
    monkeypatch.setattr(database, "store_manager", None)
    with pytest.raises(RuntimeError):
        database.get_users_collection()
