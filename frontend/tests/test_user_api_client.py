"""User API Client tests — HTTP calls against httpx.MockTransport.

Tests cover:
    - Each call hits the right method/path and parses the envelope
    - Failures become APIError carrying server detail (message, then field errors)
    - Transport errors and unreadable bodies become APIError
"""

import json

import httpx
import pytest

from directory_client.api import APIError, UserAPI, describe_failure

USER = {
    "id": "64b7f0c2a1b2c3d4e5f60718",
    "name": "Ann Lee",
    "address": "1 Main St",
    "phoneNumber": "5551234567",
    "companyName": "Acme",
    "createdAt": "2024-03-04T09:05:30.123Z",
    "updatedAt": "2024-03-04T09:05:30.123Z",
}


def _api(handler) -> UserAPI:
    return UserAPI("http://api.test/", transport=httpx.MockTransport(handler))


async def test_get_all_users_parses_records():
    seen = []

    def handler(request: httpx.Request):
        seen.append((request.method, request.url.path))
        return httpx.Response(200, json={
            "success": True, "message": "Users retrieved successfully",
            "count": 1, "data": [USER],
        })

    async with _api(handler) as api:
        users = await api.get_all_users()

    assert seen == [("GET", "/users")]
    assert users[0].id == USER["id"]
    assert users[0].phone_number == "5551234567"
    assert users[0].created_at.tzinfo is not None


async def test_create_posts_json_body():
    captured = {}

    def handler(request: httpx.Request):
        captured["method"] = request.method
        captured["path"] = request.url.path
        captured["body"] = json.loads(request.content)
        return httpx.Response(201, json={
            "success": True, "message": "User created successfully", "data": USER,
        })

    fields = {k: USER[k] for k in ("name", "address", "phoneNumber", "companyName")}
    async with _api(handler) as api:
        user = await api.create_user(fields)

    assert captured == {"method": "POST", "path": "/users", "body": fields}
    assert user.name == "Ann Lee"


async def test_update_and_delete_paths():
    seen = []

    def handler(request: httpx.Request):
        seen.append((request.method, request.url.path))
        if request.method == "DELETE":
            return httpx.Response(200, json={"success": True, "message": "User deleted successfully"})
        return httpx.Response(200, json={"success": True, "message": "ok", "data": USER})

    async with _api(handler) as api:
        await api.get_user(USER["id"])
        await api.update_user(USER["id"], {"companyName": "Acme"})
        assert await api.delete_user(USER["id"]) is None

    assert seen == [
        ("GET", f"/users/{USER['id']}"),
        ("PUT", f"/users/{USER['id']}"),
        ("DELETE", f"/users/{USER['id']}"),
    ]


async def test_validation_failure_carries_field_errors():
    def handler(request):
        return httpx.Response(400, json={
            "success": False,
            "message": "Validation Error",
            "errors": [
                {"field": "name", "message": "Name is required"},
                {"field": "phoneNumber", "message": "Phone number must be exactly 10 digits"},
            ],
        })

    async with _api(handler) as api:
        with pytest.raises(APIError) as exc_info:
            await api.create_user({})

    err = exc_info.value
    assert err.status_code == 400
    assert err.fields == ["name", "phoneNumber"]
    assert err.message == (
        "Validation Error: Name is required, Phone number must be exactly 10 digits"
    )


async def test_not_found_uses_server_message():
    def handler(request):
        return httpx.Response(404, json={"success": False, "message": "User 'x' not found"})

    async with _api(handler) as api:
        with pytest.raises(APIError) as exc_info:
            await api.get_user("x")

    assert exc_info.value.message == "User 'x' not found"
    assert exc_info.value.status_code == 404


async def test_transport_error_becomes_api_error():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    async with _api(handler) as api:
        with pytest.raises(APIError) as exc_info:
            await api.get_all_users()

    assert "Connection refused" in exc_info.value.message
    assert exc_info.value.status_code is None


async def test_unexpected_payload_becomes_api_error():
    def handler(request):
        return httpx.Response(200, json={"success": True, "data": {"id": "only-an-id"}})

    async with _api(handler) as api:
        with pytest.raises(APIError):
            await api.get_user("only-an-id")


def test_describe_failure_without_json_body():
    response = httpx.Response(502, text="<html>Bad Gateway</html>")
    assert describe_failure(response) == ("Request failed with status 502", [])
