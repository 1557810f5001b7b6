"""Route aggregator.

Usage:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.auth.router import router as auth_router
from api.routes.crops.router import router as crops_router
from api.routes.health.router import router as health_router
from api.routes.realtime.router import router as realtime_router


def create_api_router() -> APIRouter:
    """Build the main router with every sub-router registered."""
    api_router = APIRouter()

    # Health checks at the root (/health, /ready)
    api_router.include_router(health_router, tags=["health"])

    api_router.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    api_router.include_router(crops_router, prefix="/api/crops", tags=["crops"])
    api_router.include_router(realtime_router, tags=["realtime"])

    return api_router
