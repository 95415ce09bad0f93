"""Error Handlers — global exception handlers for the User Directory API.

Invariants:
    - DirectoryError → its envelope; 5xx detail only in development mode
    - RequestValidationError (bad JSON, wrong types) → 400 validation envelope with field list
    - Unmatched route (404/405) → route-not-found envelope listing the valid routes
    - Other HTTPExceptions keep their status; 413 carries code PAYLOAD_TOO_LARGE
    - Exception (catch-all) → 500, message suppressed outside development mode
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from directory_api.api.routes import available_routes
from directory_api.config import get_settings
from directory_api.core.errors import DirectoryError, ErrorSeverity, RecordValidationError
from directory_api.core.user_rules import FieldViolation

logger = logging.getLogger(__name__)

HIDDEN_DETAIL = "Something went wrong"

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}

_HTTP_CODES = {
    status.HTTP_413_REQUEST_ENTITY_TOO_LARGE: "PAYLOAD_TOO_LARGE",
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_directory_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _server_error_body(code: str, detail: str) -> dict:
    return {
        "success": False,
        "message": "Internal Server Error",
        "code": code,
        "error": detail if get_settings().is_development else HIDDEN_DETAIL,
    }


def _register_directory_error_handler(app: FastAPI) -> None:

    @app.exception_handler(DirectoryError)
    async def directory_error_handler(request: Request, exc: DirectoryError):
        """Handle all domain/infrastructure errors."""
        extra = {
            "error_code": exc.code,
            "path": request.url.path,
            "method": request.method,
            "record_id": exc.context.record_id,
        }
        logger.log(_LOG_LEVELS[exc.severity], f"{exc.code}: {exc.message}", extra=extra)
        if exc.recoverable:
            content = exc.to_response()
        else:
            content = _server_error_body(exc.code, exc.message)
        return JSONResponse(status_code=exc.http_status, content=content)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle request-shape errors with the same envelope as field rules."""
        logger.info(
            f"Request validation failed on {request.url.path}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=RecordValidationError(_violations_from(exc)).to_response(),
        )


def _violations_from(exc: RequestValidationError) -> list[FieldViolation]:
    violations = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        violations.append(FieldViolation(
            ".".join(loc) or "body", error.get("msg", "Invalid value"),
        ))
    return violations


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Unmatched routes list every valid route; other HTTP errors keep their status."""
        if exc.status_code in (
            status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED,
        ):
            content = {
                "success": False,
                "message": f"Route '{request.url.path}' not found",
                "code": "ROUTE_NOT_FOUND",
                "method": request.method,
                "availableRoutes": available_routes(),
            }
        else:
            content = {
                "success": False,
                "message": str(exc.detail),
                "code": _HTTP_CODES.get(exc.status_code, f"HTTP_{exc.status_code}"),
            }
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — detail only in development mode."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_server_error_body("INTERNAL_ERROR", str(exc)),
        )
