"""Request Body Limit — rejects oversized bodies before they are parsed.

Invariants:
    - Content-Length above max_bytes → 413 envelope, the handler never runs
    - Bodies without a usable Content-Length (chunked uploads) are counted as they
      stream; crossing max_bytes raises a 413 HTTPException from receive, so the
      route body is never parsed
"""

import logging

from fastapi import HTTPException, status
from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

TOO_LARGE_MESSAGE = "Request body exceeds allowed size"


class RequestSizeLimitMiddleware:
    def __init__(self, app: ASGIApp, max_bytes: int = 10 * 1024 * 1024) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        length = Headers(scope=scope).get("content-length")
        try:
            size = int(length) if length is not None else None
        except ValueError:
            size = None
        if size is not None and size > self.max_bytes:
            self._log_rejection(scope, size)
            response = JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content={
                    "success": False,
                    "message": TOO_LARGE_MESSAGE,
                    "code": "PAYLOAD_TOO_LARGE",
                },
            )
            await response(scope, receive, send)
            return

        received = 0

        async def _counting_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    self._log_rejection(scope, received)
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail=TOO_LARGE_MESSAGE,
                    )
            return message

        await self.app(scope, _counting_receive, send)

    def _log_rejection(self, scope: Scope, size: int) -> None:
        logger.warning(
            f"Rejected {size}-byte body (limit {self.max_bytes})",
            extra={"path": scope.get("path"), "method": scope.get("method")},
        )
