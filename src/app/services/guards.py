"""Authorization guards and the guard chain.

A guard stage is an async callable over a ``GuardContext`` returning a
``GuardResult``: either ``PROCEED`` or a halt carrying the error to render.
``run_guards`` evaluates stages in order and stops at the first halt, so
authentication, role and resource checks never run past a failure.

The pure checks (``check_role``, ``resolve_farm_id``) are exposed for reuse
outside HTTP handling.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from app.domain.farm import Farm
from app.observability import bind_user
from config.logging import log_security_event
from utils.errors import (
    AccessDenied,
    AppError,
    AuthenticationRequired,
    InfrastructureError,
    InsufficientPermissions,
    InternalError,
    NotFoundError,
    ValidationFailure,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from app.bootstrap.container import ServiceContainer
    from app.domain.claims import Claims

logger = logging.getLogger(__name__)

FARM_ID_FIELD = "farmId"


@dataclass(slots=True)
class GuardContext:
    """Request view shared by the guard stages.

    Attributes:
        services: Service container (verifier, store, collections)
        authorization: Raw Authorization header
        path_params: Path parameters
        body: Parsed JSON body (empty for bodiless requests)
        query: Query parameters
        claims: Set by the authentication stage
        farm: Set by the farm access stage
    """

    services: ServiceContainer
    authorization: str | None
    path_params: Mapping[str, Any]
    body: Mapping[str, Any]
    query: Mapping[str, Any]
    claims: Claims | None = None
    farm: Farm | None = None


@dataclass(frozen=True, slots=True)
class GuardResult:
    error: AppError | None = None

    @property
    def halted(self) -> bool:
        return self.error is not None


PROCEED = GuardResult()

GuardStage = Callable[[GuardContext], Awaitable[GuardResult]]


async def run_guards(
    context: GuardContext,
    stages: Iterable[GuardStage],
) -> GuardResult:
    """Run the stages in order, short-circuiting on the first halt."""
    for stage in stages:
        result = await stage(context)
        if result.halted:
            return result
    return PROCEED


# ──────────────────────────────────────────────────────────────────────────────
# Pure checks
# ──────────────────────────────────────────────────────────────────────────────


def check_role(claims: Claims | None, allowed_roles: tuple[str, ...]) -> None:
    """Raise unless the caller's role is in ``allowed_roles``."""
    if claims is None:
        raise AuthenticationRequired()
    if claims.role not in allowed_roles:
        raise InsufficientPermissions(allowed_roles)


def resolve_farm_id(
    path_params: Mapping[str, Any],
    body: Mapping[str, Any],
    query: Mapping[str, Any],
    field: str = FARM_ID_FIELD,
) -> str | None:
    """First non-empty farm id from path, then body, then query."""
    for source in (path_params, body, query):
        value = source.get(field)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


# ──────────────────────────────────────────────────────────────────────────────
# Stages
# ──────────────────────────────────────────────────────────────────────────────


def authenticate(*, optional: bool = False) -> GuardStage:
    """Stage verifying the bearer token (soft-fail when ``optional``)."""

    async def _stage(context: GuardContext) -> GuardResult:
        try:
            context.claims = await context.services.verifier.verify(
                context.authorization,
                optional=optional,
            )
        except AppError as exc:
            return GuardResult(error=exc)
        except InfrastructureError:
            logger.exception("authentication_provider_failed")
            return GuardResult(
                error=InternalError(
                    "Unable to verify credentials",
                    error="Authentication unavailable",
                )
            )
        if context.claims is not None:
            bind_user(context.claims.uid)
        return PROCEED

    return _stage


def require_role(*roles: str) -> GuardStage:
    """Stage passing iff the caller's role is one of ``roles``."""
    allowed = tuple(roles)

    async def _stage(context: GuardContext) -> GuardResult:
        try:
            check_role(context.claims, allowed)
        except AppError as exc:
            if context.claims is not None:
                log_security_event(
                    logger,
                    "role_denied",
                    uid=context.claims.uid,
                    role=context.claims.role,
                    allowed_roles=list(allowed),
                )
            return GuardResult(error=exc)
        return PROCEED

    return _stage


def require_farm_access(field: str = FARM_ID_FIELD) -> GuardStage:
    """Stage loading the farm and checking owner/member/admin access.

    Performs exactly one store read and never writes.
    """

    async def _stage(context: GuardContext) -> GuardResult:
        claims = context.claims
        if claims is None:
            return GuardResult(error=AuthenticationRequired())

        farm_id = resolve_farm_id(context.path_params, context.body, context.query, field)
        if farm_id is None:
            return GuardResult(
                error=ValidationFailure("Farm ID must be provided", error="Farm ID required")
            )

        services = context.services
        try:
            data = await services.store.get(services.collections.farms, farm_id)
        except InfrastructureError:
            logger.exception("farm_access_check_failed", extra={"farm_id": farm_id})
            return GuardResult(
                error=InternalError("Error checking farm access", error="Internal server error")
            )

        if data is None:
            return GuardResult(
                error=NotFoundError("The specified farm does not exist", error="Farm not found")
            )

        farm = Farm.from_store_dict(farm_id, data)
        if not farm.grants_access_to(claims.uid, claims.role):
            log_security_event(logger, "farm_access_denied", uid=claims.uid, farm_id=farm_id)
            return GuardResult(error=AccessDenied("You do not have access to this farm"))

        context.farm = farm
        return PROCEED

    return _stage
