"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes never contain business logic (delegate to services)
    - ROUTE_INDEX lists every public route; the banner and the 404 handler both use it
"""

ROUTE_INDEX: dict[str, dict[str, str]] = {
    "service": {
        "banner": "GET /",
        "health": "GET /health",
        "ready": "GET /health/ready",
    },
    "users": {
        "getAll": "GET /users",
        "getById": "GET /users/:id",
        "create": "POST /users",
        "update": "PUT /users/:id",
        "delete": "DELETE /users/:id",
    },
}


def available_routes() -> list[str]:
    return [route for group in ROUTE_INDEX.values() for route in group.values()]
