"""Observability helpers shared by the app and api layers.

Usage:
    from app.observability import bind_request, bind_user, log_context
"""

from app.observability.request_context import (
    ANONYMOUS_USER,
    CORRELATION_HEADER,
    RequestContext,
    bind_request,
    bind_user,
    get_correlation_id,
    get_user_id,
    log_context,
    release_request,
)

__all__ = [
    "ANONYMOUS_USER",
    "CORRELATION_HEADER",
    "RequestContext",
    "bind_request",
    "bind_user",
    "get_correlation_id",
    "get_user_id",
    "log_context",
    "release_request",
]
