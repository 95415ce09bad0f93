"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET /health always returns 200 if the process is up (liveness), with uptime in seconds
    - GET /health/ready returns 503 if the document store does not answer a ping
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from directory_api.config import get_settings
from directory_api.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])

_started = time.monotonic()


def uptime_seconds() -> float:
    return round(time.monotonic() - _started, 3)


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": uptime_seconds(),
        "environment": get_settings().environment,
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe — includes document store connectivity."""
    manager = database.store_manager
    store_ok = await manager.health_check() if manager else False
    if not store_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "store_unavailable",
            },
        )
    return {"status": "ready", "checks": {"store": "healthy"}}
