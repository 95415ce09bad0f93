"""Service Banner — GET / describes the service and lists its routes."""

from fastapi import APIRouter

from directory_api import __version__
from directory_api.api.routes import ROUTE_INDEX

router = APIRouter(tags=["service"])


@router.get("/")
async def service_banner():
    return {
        "message": "Welcome to the User Directory API",
        "version": __version__,
        "status": "Running",
        "endpoints": ROUTE_INDEX,
    }
