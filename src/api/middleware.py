"""Per-request context and access log."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from app.observability import (
    CORRELATION_HEADER,
    bind_request,
    get_correlation_id,
    get_user_id,
    release_request,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from fastapi import Request, Response

logger = logging.getLogger(__name__)


async def log_requests(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Bind the request context, log the outcome and echo the correlation id.

    Client and server errors are logged at WARNING so they stand out from
    ordinary traffic.
    """
    token = bind_request(request.headers.get(CORRELATION_HEADER))
    started_at = time.perf_counter()
    try:
        response = await call_next(request)
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            "http_request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started_at) * 1000, 2),
                "user_id": get_user_id(),
                "client_ip": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent"),
            },
        )
        response.headers[CORRELATION_HEADER] = get_correlation_id()
        return response
    finally:
        release_request(token)
