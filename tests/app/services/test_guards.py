"""Tests for the guard stages and the guard chain."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from app.domain.claims import Claims
from app.infra.stores.memory_document_store import MemoryDocumentStore
from app.services.guards import (
    PROCEED,
    GuardContext,
    GuardResult,
    authenticate,
    check_role,
    require_farm_access,
    require_role,
    resolve_farm_id,
    run_guards,
)
from tests.fakes.container import build_test_container
from tests.fakes.fake_identity_provider import FakeIdentityProvider, UnavailableIdentityProvider
from utils.errors import (
    AccessDenied,
    AuthenticationRequired,
    FirestoreUnavailableError,
    InsufficientPermissions,
    InternalError,
    MissingToken,
    NotFoundError,
    ValidationFailure,
)

FARMS = {
    "farms": {
        "farm-1": {"ownerId": "owner-1", "members": ["member-1"], "totalPlannedArea": 0},
    }
}


def _context(
    *,
    claims: Claims | None = None,
    path_params: dict[str, Any] | None = None,
    body: dict[str, Any] | None = None,
    query: dict[str, Any] | None = None,
    authorization: str | None = None,
    store: Any = None,
    identity: FakeIdentityProvider | None = None,
) -> GuardContext:
    services = build_test_container(
        identity=identity,
        store=store if store is not None else MemoryDocumentStore(FARMS),
    )
    return GuardContext(
        services=services,
        authorization=authorization,
        path_params=path_params or {},
        body=body or {},
        query=query or {},
        claims=claims,
    )


class TestRunGuards:
    """Chain ordering and short-circuit."""

    @pytest.mark.asyncio
    async def test_stops_at_first_halt(self) -> None:
        """Stages after a halt are never invoked."""
        halt = GuardResult(error=AccessDenied())
        first = AsyncMock(return_value=PROCEED)
        second = AsyncMock(return_value=halt)
        third = AsyncMock(return_value=PROCEED)

        result = await run_guards(_context(), [first, second, third])

        assert result is halt
        first.assert_awaited_once()
        second.assert_awaited_once()
        third.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_all_pass(self) -> None:
        result = await run_guards(_context(), [AsyncMock(return_value=PROCEED)])
        assert result.halted is False


class TestAuthenticateStage:
    """Authentication stage."""

    @pytest.mark.asyncio
    async def test_sets_claims(self) -> None:
        identity = FakeIdentityProvider()
        identity.add_token("good", {"uid": "owner-1"})
        context = _context(authorization="Bearer good", identity=identity)

        result = await authenticate()(context)

        assert result is PROCEED
        assert context.claims is not None
        assert context.claims.uid == "owner-1"

    @pytest.mark.asyncio
    async def test_missing_token_halts(self) -> None:
        result = await authenticate()(_context())
        assert isinstance(result.error, MissingToken)

    @pytest.mark.asyncio
    async def test_optional_proceeds_without_claims(self) -> None:
        context = _context()
        result = await authenticate(optional=True)(context)
        assert result is PROCEED
        assert context.claims is None

    @pytest.mark.asyncio
    async def test_provider_outage_halts_with_internal_error(self) -> None:
        context = _context(authorization="Bearer any", identity=UnavailableIdentityProvider())
        result = await authenticate()(context)
        assert isinstance(result.error, InternalError)
        assert result.error.status_code == 500


class TestRoleGuard:
    """Role membership checks."""

    def test_check_role_requires_claims(self) -> None:
        with pytest.raises(AuthenticationRequired):
            check_role(None, ("admin",))

    @pytest.mark.asyncio
    async def test_allowed_role_proceeds(self) -> None:
        context = _context(claims=Claims(uid="a1", role="agronomist"))
        assert await require_role("agronomist", "admin")(context) is PROCEED

    @pytest.mark.asyncio
    async def test_other_role_denied(self) -> None:
        context = _context(claims=Claims(uid="f1", role="farmer"))

        result = await require_role("agronomist", "admin")(context)

        assert isinstance(result.error, InsufficientPermissions)
        assert result.error.status_code == 403
        assert result.error.message == "Access denied. Required role: agronomist or admin"


class TestFarmAccessGuard:
    """Owner, member and admin each grant access."""

    def test_resolve_farm_id_precedence(self) -> None:
        """Path wins over body, body over query."""
        assert resolve_farm_id({"farmId": "p"}, {"farmId": "b"}, {"farmId": "q"}) == "p"
        assert resolve_farm_id({}, {"farmId": "b"}, {"farmId": "q"}) == "b"
        assert resolve_farm_id({}, {"farmId": "  "}, {"farmId": "q"}) == "q"
        assert resolve_farm_id({}, {}, {}) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "claims",
        [
            Claims(uid="owner-1"),
            Claims(uid="member-1"),
            Claims(uid="someone", role="admin"),
        ],
    )
    async def test_access_granted(self, claims: Claims) -> None:
        context = _context(claims=claims, body={"farmId": "farm-1"})

        result = await require_farm_access()(context)

        assert result is PROCEED
        assert context.farm is not None
        assert context.farm.id == "farm-1"
        assert context.farm.owner_id == "owner-1"

    @pytest.mark.asyncio
    async def test_outsider_denied(self) -> None:
        context = _context(claims=Claims(uid="outsider"), path_params={"farmId": "farm-1"})

        result = await require_farm_access()(context)

        assert isinstance(result.error, AccessDenied)
        assert result.error.status_code == 403
        assert context.farm is None

    @pytest.mark.asyncio
    async def test_missing_farm_is_404(self) -> None:
        context = _context(claims=Claims(uid="owner-1"), query={"farmId": "nope"})
        result = await require_farm_access()(context)
        assert isinstance(result.error, NotFoundError)
        assert result.error.error == "Farm not found"

    @pytest.mark.asyncio
    async def test_missing_farm_id_is_400(self) -> None:
        result = await require_farm_access()(_context(claims=Claims(uid="owner-1")))
        assert isinstance(result.error, ValidationFailure)
        assert result.error.error == "Farm ID required"

    @pytest.mark.asyncio
    async def test_unauthenticated_is_401(self) -> None:
        result = await require_farm_access()(_context(body={"farmId": "farm-1"}))
        assert isinstance(result.error, AuthenticationRequired)

    @pytest.mark.asyncio
    async def test_store_failure_is_500(self) -> None:
        store = AsyncMock()
        store.get.side_effect = FirestoreUnavailableError("down")
        context = _context(claims=Claims(uid="owner-1"), body={"farmId": "farm-1"}, store=store)

        result = await require_farm_access()(context)

        assert isinstance(result.error, InternalError)
        assert result.error.message == "Error checking farm access"

    @pytest.mark.asyncio
    async def test_reads_once_and_never_writes(self) -> None:
        store = AsyncMock()
        store.get.return_value = {"ownerId": "owner-1", "members": []}
        context = _context(claims=Claims(uid="owner-1"), body={"farmId": "farm-1"}, store=store)

        await require_farm_access()(context)

        store.get.assert_awaited_once_with("farms", "farm-1")
        store.set.assert_not_called()
        store.update.assert_not_called()
