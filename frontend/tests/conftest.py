"""Client test fixtures — sample records, a scripted fake API and a controllable clock."""

from datetime import datetime, timezone

import pytest

from directory_api.schemas.user import UserRecord
from directory_client.api import APIError

CREATED = datetime(2024, 3, 4, 9, 5, 30, tzinfo=timezone.utc)


def make_user(user_id: str = "64b7f0c2a1b2c3d4e5f60718", **overrides) -> UserRecord:
    fields = {
        "id": user_id,
        "name": "Ann Lee",
        "address": "1 Main St",
        "phoneNumber": "5551234567",
        "companyName": "Acme",
        "createdAt": CREATED,
        "updatedAt": CREATED,
    }
    fields.update(overrides)
    return UserRecord.model_validate(fields)


class FakeAPI:
    """In-memory stand-in for UserAPI. Set `fail` to make the next call raise it."""

    def __init__(self, users=None):
        self.users = list(users or [])
        self.calls: list[tuple] = []
        self.fail: APIError | None = None
        self._next_id = 0

    def _maybe_fail(self):
        if self.fail:
            error, self.fail = self.fail, None
            raise error

    async def get_all_users(self):
        self.calls.append(("list",))
        self._maybe_fail()
        return list(self.users)

    async def create_user(self, fields):
        self.calls.append(("create", fields))
        self._maybe_fail()
        self._next_id += 1
        user = make_user(f"{self._next_id:024x}", **fields)
        self.users.append(user)
        return user

    async def update_user(self, user_id, fields):
        self.calls.append(("update", user_id, fields))
        self._maybe_fail()
        current = next(u for u in self.users if u.id == user_id)
        user = current.model_copy(update={
            "name": fields.get("name", current.name),
            "address": fields.get("address", current.address),
            "phone_number": fields.get("phoneNumber", current.phone_number),
            "company_name": fields.get("companyName", current.company_name),
        })
        self.users = [user if u.id == user_id else u for u in self.users]
        return user

    async def delete_user(self, user_id):
        self.calls.append(("delete", user_id))
        self._maybe_fail()
        self.users = [u for u in self.users if u.id != user_id]


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def ann():
    return make_user()


@pytest.fixture
def bo():
    return make_user("64b7f0c2a1b2c3d4e5f60719", name="Bo Chen", companyName="Globex")


@pytest.fixture
def fake_api(ann, bo):
    return FakeAPI([ann, bo])


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def valid_fields():
    return {
        "name": "Cy Diaz",
        "address": "9 Elm Rd",
        "phoneNumber": "5559876543",
        "companyName": "Initech",
    }


@pytest.fixture
def user_factory():
    return make_user
