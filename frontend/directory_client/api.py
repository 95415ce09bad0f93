"""User API Client — the five HTTP calls behind one small async surface.

Invariants:
    - Every failure (transport, non-2xx, unreadable body) raises APIError, never raw httpx errors
    - APIError.message prefers server detail: envelope message, then its field errors
    - Successful payloads are parsed into UserRecord (shared schema with the server)
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from directory_api.schemas.user import UserRecord

logger = logging.getLogger(__name__)


class APIError(Exception):
    """A failed API call, carrying a human-readable message."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or []

    @property
    def fields(self) -> list[str]:
        return [e.get("field", "") for e in self.errors]


def describe_failure(response: httpx.Response) -> tuple[str, list[dict[str, Any]]]:
    """Readable message and field errors for a non-2xx response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        return f"Request failed with status {response.status_code}", []

    errors = [e for e in body.get("errors") or [] if isinstance(e, dict)]
    joined = ", ".join(str(e.get("message", "")) for e in errors if e.get("message"))
    message = body.get("message") or ""
    if message and joined:
        return f"{message}: {joined}", errors
    return message or joined or f"Request failed with status {response.status_code}", errors


class UserAPI:
    """Async wrapper over the /users endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "UserAPI":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self, method: str, path: str, json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e!r}")
            raise APIError(str(e) or type(e).__name__) from e

        if response.is_error:
            message, errors = describe_failure(response)
            raise APIError(message, response.status_code, errors)
        try:
            return response.json()
        except ValueError as e:
            raise APIError("Server returned an unreadable response", response.status_code) from e

    @staticmethod
    def _record(body: dict[str, Any]) -> UserRecord:
        try:
            return UserRecord.model_validate(body["data"])
        except (KeyError, TypeError, ValidationError) as e:
            raise APIError("Server returned an unexpected user payload") from e

    async def get_all_users(self) -> list[UserRecord]:
        body = await self._request("GET", "/users")
        try:
            return [UserRecord.model_validate(item) for item in body["data"]]
        except (KeyError, TypeError, ValidationError) as e:
            raise APIError("Server returned an unexpected user list") from e

    async def get_user(self, user_id: str) -> UserRecord:
        return self._record(await self._request("GET", f"/users/{user_id}"))

    async def create_user(self, fields: dict[str, Any]) -> UserRecord:
        return self._record(await self._request("POST", "/users", json=fields))

    async def update_user(self, user_id: str, fields: dict[str, Any]) -> UserRecord:
        return self._record(await self._request("PUT", f"/users/{user_id}", json=fields))

    async def delete_user(self, user_id: str) -> None:
        await self._request("DELETE", f"/users/{user_id}")
