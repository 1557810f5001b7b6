"""FastAPI dependencies: container access, JSON body and the guard chain."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from fastapi import Request

from app.services.guards import GuardContext, authenticate, run_guards
from utils.errors import PayloadTooLarge, ValidationFailure

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.bootstrap.container import ServiceContainer
    from app.services.guards import GuardStage

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


async def read_json_object(request: Request) -> dict[str, Any]:
    """Parse the request body as a JSON object; empty bodies yield ``{}``.

    Bodies above ``max_body_bytes`` are refused before parsing.
    """
    limit = get_container(request).settings.max_body_bytes
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise PayloadTooLarge()
    raw = await request.body()
    if len(raw) > limit:
        raise PayloadTooLarge()
    if not raw.strip():
        return {}
    try:
        payload = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValidationFailure("Request body is not valid JSON", error="Invalid JSON") from exc
    if not isinstance(payload, dict):
        raise ValidationFailure("Request body must be a JSON object", error="Invalid JSON")
    return payload


def guarded(
    *stages: GuardStage,
    optional_auth: bool = False,
) -> Callable[[Request], Awaitable[GuardContext]]:
    """Dependency running authentication followed by ``stages``.

    The first halting stage raises its error; otherwise the populated
    context (claims, farm, parsed body) is handed to the route.
    """

    async def _dependency(request: Request) -> GuardContext:
        body = await read_json_object(request) if request.method in _BODY_METHODS else {}
        context = GuardContext(
            services=get_container(request),
            authorization=request.headers.get("authorization"),
            path_params=request.path_params,
            body=body,
            query=request.query_params,
        )
        result = await run_guards(context, (authenticate(optional=optional_auth), *stages))
        if result.halted:
            raise result.error
        return context

    return _dependency
