"""SmartAgriNet backend entrypoint.

Initializes the bootstrap and exposes the ASGI application (FastAPI).

Usage (production):
    uvicorn app.app:app --host 0.0.0.0 --port 5000

Usage (development):
    uvicorn app.app:app --reload --port 5000
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from api.errors import register_exception_handlers
from api.middleware import log_requests
from api.routes import create_api_router
from app.bootstrap import (
    build_container,
    initialize_app,
    install_loop_exception_handler,
    install_process_error_handlers,
    validate_runtime_settings,
)
from config.logging import get_logger
from config.settings import get_base_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from app.bootstrap.container import ServiceContainer

# Logging must be configured before any module logs
initialize_app()

logger = get_logger(__name__)

SHUTDOWN_DRAIN_SECONDS = 30.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifecycle.

    Startup installs the fatal error hooks and builds the service container
    unless one was injected.
    Shutdown drains pending side effects and closes the HTTP client.
    """
    settings = get_base_settings()
    logger.info("app_starting", extra={"service": settings.service_name})
    install_process_error_handlers()
    install_loop_exception_handler()

    if app.state.container is None:
        validate_runtime_settings()
        app.state.container = build_container()

    yield

    logger.info("app_shutting_down", extra={"service": settings.service_name})
    await app.state.container.aclose(SHUTDOWN_DRAIN_SECONDS)


def create_app(container: ServiceContainer | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        container: Prebuilt services (tests); built at startup when omitted.
    """
    settings = get_base_settings()
    fastapi_app = FastAPI(
        title="SmartAgriNet",
        description="Agricultural SaaS backend: accounts, crops and realtime rooms",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None,
    )
    fastapi_app.state.container = container

    fastapi_app.add_middleware(GZipMiddleware, minimum_size=1024)
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Correlation-ID"],
    )
    fastapi_app.middleware("http")(log_requests)

    register_exception_handlers(fastapi_app)
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": settings.service_name})
    return fastapi_app


# ASGI application for uvicorn
app = create_app()


def main() -> None:
    """Entrypoint for direct execution (development)."""
    import uvicorn

    settings = get_base_settings()
    logger.info("server_starting", extra={"port": settings.port, "environment": settings.environment})
    uvicorn.run("app.app:app", host="0.0.0.0", port=settings.port, reload=settings.is_development)


if __name__ == "__main__":
    main()
