"""Repository test fixtures — in-memory collection and a controllable clock."""

from datetime import datetime, timedelta, timezone

import pytest
from mongomock_motor import AsyncMongoMockClient

from directory_api.services.user_repository import UserRepository


class FakeClock:
    """Returns the same instant until advanced."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 4, 9, 5, 30, 123000, tzinfo=timezone.utc))


@pytest.fixture
def users_collection():
    return AsyncMongoMockClient()["directory_test"]["users"]


@pytest.fixture
def repo(users_collection, clock):
    return UserRepository(users_collection, clock=clock)


@pytest.fixture
def ann_lee():
    return {
        "name": "Ann Lee",
        "address": "1 Main St",
        "phoneNumber": "5551234567",
        "companyName": "Acme",
    }
