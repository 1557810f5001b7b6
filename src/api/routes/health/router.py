"""Liveness and readiness endpoints."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_container
from app.bootstrap.container import ServiceContainer

logger = logging.getLogger(__name__)

router = APIRouter()

_STARTED_AT = time.monotonic()
READINESS_TIMEOUT_SECONDS = 3.0


@router.get("/health")
async def health_check(services: ServiceContainer = Depends(get_container)) -> dict[str, Any]:
    """Liveness check: process status and uptime."""
    return {
        "status": "OK",
        "timestamp": datetime.now(UTC).isoformat(),
        "uptime": round(time.monotonic() - _STARTED_AT, 3),
        "environment": services.settings.environment,
    }


@router.get("/ready")
async def readiness_check(services: ServiceContainer = Depends(get_container)) -> JSONResponse:
    """Readiness check: the document store must answer."""
    started_at = time.perf_counter()
    try:
        store_ok = await asyncio.wait_for(services.store.ping(), timeout=READINESS_TIMEOUT_SECONDS)
        store_check: dict[str, Any] = {"status": "ok" if store_ok else "failed"}
    except TimeoutError:
        store_check = {"status": "failed", "error": "timeout"}
    except Exception as exc:
        logger.warning("readiness_store_check_failed", extra={"error_type": type(exc).__name__})
        store_check = {"status": "failed", "error": type(exc).__name__}
    store_check["latency_ms"] = round((time.perf_counter() - started_at) * 1000, 2)

    ready = store_check["status"] == "ok"
    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "document_store": store_check,
            "pending_side_effects": services.side_effects.active_count,
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)
