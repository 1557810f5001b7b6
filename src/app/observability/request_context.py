"""Per-request logging context.

The HTTP middleware binds a ``RequestContext`` for every request; the
authentication stage fills in the caller once the token is verified. The
logging filter reads it so every record carries ``correlation_id`` and
``user_id`` without the caller passing them.

The context object is shared, not copied: Starlette runs the endpoint in a
child task, and the middleware must still see the user id set there.

Usage:
    token = bind_request(request.headers.get(CORRELATION_HEADER))
    try:
        ...
    finally:
        release_request(token)
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass

CORRELATION_HEADER = "X-Correlation-ID"
ANONYMOUS_USER = "anonymous"


@dataclass(slots=True)
class RequestContext:
    correlation_id: str
    user_id: str = ANONYMOUS_USER


_request_context: ContextVar[RequestContext | None] = ContextVar("request_context", default=None)


def bind_request(correlation_id: str | None = None) -> Token[RequestContext | None]:
    """Start a request context, generating a correlation id when none is given."""
    context = RequestContext(correlation_id=correlation_id or str(uuid.uuid4()))
    return _request_context.set(context)


def release_request(token: Token[RequestContext | None]) -> None:
    _request_context.reset(token)


def bind_user(uid: str) -> None:
    """Attach the authenticated uid to the current request, if any."""
    context = _request_context.get()
    if context is not None:
        context.user_id = uid


def get_correlation_id() -> str:
    context = _request_context.get()
    return context.correlation_id if context else ""


def get_user_id() -> str:
    context = _request_context.get()
    return context.user_id if context else ANONYMOUS_USER


def log_context() -> dict[str, str]:
    """Fields injected into every log record."""
    return {"correlation_id": get_correlation_id(), "user_id": get_user_id()}
