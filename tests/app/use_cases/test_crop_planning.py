"""Tests for crop plan creation and progress updates."""

from __future__ import annotations

from typing import Any

import pytest

from app.bootstrap.container import Collections
from app.domain.claims import Claims
from app.domain.farm import Farm
from app.infra.stores.memory_document_store import MemoryDocumentStore
from app.use_cases.crops import CreateCropPlanUseCase, UpdatePlanProgressUseCase
from utils.errors import (
    AccessDenied,
    FirestoreUnavailableError,
    InternalError,
    NotFoundError,
    ValidationFailure,
)


def _plan_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "farmId": "farm-1",
        "season": "rainy",
        "availableWater": 1200,
        "budget": "5000",
        "laborAvailability": "medium",
        "marketDemand": {"maize": "high"},
        "cropId": "maize",
        "cropName": "Yellow maize",
        "area": 2.5,
        "plantingDate": "2025-04-01T00:00:00Z",
        "expectedHarvestDate": "2025-08-15T00:00:00Z",
        "notes": "North field",
    }
    payload.update(overrides)
    return payload


def _store() -> MemoryDocumentStore:
    return MemoryDocumentStore(
        {
            "farms": {"farm-1": {"ownerId": "owner-1", "cropPlans": [], "totalPlannedArea": 1.0}},
            "cropPlans": {
                "plan-1": {
                    "farmId": "farm-1",
                    "userId": "owner-1",
                    "notes": "sown late",
                    "progress": {"planted": False, "fertilized": False},
                    "costs": {"seeds": 0, "labor": 0, "total": 0},
                }
            },
        }
    )


FARM = Farm(id="farm-1", owner_id="owner-1")
OWNER = Claims(uid="owner-1")


class TestCreateCropPlan:
    """Plan creation and farm aggregates."""

    @pytest.mark.asyncio
    async def test_creates_plan_and_updates_farm(self) -> None:
        store = _store()

        response = await CreateCropPlanUseCase(store, Collections()).execute(
            OWNER, FARM, _plan_payload()
        )

        plan = response["cropPlan"]
        assert response["message"] == "Crop plan created successfully"
        assert plan["id"].startswith("farm-1_maize_")
        assert plan["userId"] == "owner-1"
        assert plan["budget"] == 5000.0
        assert plan["status"] == "planned"
        assert plan["progress"]["planted"] is False
        assert plan["costs"]["total"] == 0

        stored = await store.get("cropPlans", plan["id"])
        assert stored is not None
        assert stored["cropName"] == "Yellow maize"

        farm = await store.get("farms", "farm-1")
        assert farm["totalPlannedArea"] == 3.5
        assert farm["cropPlans"] == [plan["id"]]

    @pytest.mark.asyncio
    async def test_invalid_payload_writes_nothing(self) -> None:
        store = _store()

        with pytest.raises(ValidationFailure) as exc_info:
            await CreateCropPlanUseCase(store, Collections()).execute(
                OWNER, FARM, _plan_payload(season="monsoon", area=-1, plantingDate="soon")
            )

        fields = [detail["field"] for detail in exc_info.value.details]
        assert fields == ["season", "area", "plantingDate"]
        assert store.count("cropPlans") == 1


class TestUpdatePlanProgress:
    """Progress flags and additive costs."""

    @pytest.mark.asyncio
    async def test_costs_accumulate_across_updates(self) -> None:
        """Two updates add to the buckets and to the total."""
        store = _store()
        use_case = UpdatePlanProgressUseCase(store, Collections())

        await use_case.execute(
            OWNER, "plan-1", {"stage": "planted", "completed": True, "costs": {"seeds": 100}}
        )
        response = await use_case.execute(
            OWNER,
            "plan-1",
            {"stage": "fertilized", "completed": True, "costs": {"seeds": 20, "labor": 30}},
        )

        plan = await store.get("cropPlans", "plan-1")
        assert response == {"message": "Crop plan progress updated successfully"}
        assert plan["progress"] == {"planted": True, "fertilized": True}
        assert plan["costs"] == {"seeds": 120, "labor": 30, "total": 150}

    @pytest.mark.asyncio
    async def test_notes_are_appended(self) -> None:
        store = _store()

        await UpdatePlanProgressUseCase(store, Collections()).execute(
            OWNER, "plan-1", {"stage": "irrigated", "completed": False, "notes": "drip lines fixed"}
        )

        plan = await store.get("cropPlans", "plan-1")
        first, second = plan["notes"].split("\n")
        assert first == "sown late"
        assert second.endswith(": drip lines fixed")
        assert plan["progress"]["irrigated"] is False
        assert plan["costs"]["total"] == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "claims",
        [Claims(uid="ops", role="admin"), Claims(uid="worker", farm_id="farm-1")],
    )
    async def test_admin_and_farm_members_may_update(self, claims: Claims) -> None:
        store = _store()
        await UpdatePlanProgressUseCase(store, Collections()).execute(
            claims, "plan-1", {"stage": "harvested", "completed": True}
        )
        assert (await store.get("cropPlans", "plan-1"))["progress"]["harvested"] is True

    @pytest.mark.asyncio
    async def test_outsider_denied(self) -> None:
        with pytest.raises(AccessDenied):
            await UpdatePlanProgressUseCase(_store(), Collections()).execute(
                Claims(uid="outsider", farm_id="farm-2"),
                "plan-1",
                {"stage": "planted", "completed": True},
            )

    @pytest.mark.asyncio
    async def test_unknown_plan(self) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await UpdatePlanProgressUseCase(_store(), Collections()).execute(
                OWNER, "missing", {"stage": "planted", "completed": True}
            )
        assert exc_info.value.error == "Crop plan not found"

    @pytest.mark.asyncio
    async def test_rejects_unknown_cost_bucket(self) -> None:
        with pytest.raises(ValidationFailure):
            await UpdatePlanProgressUseCase(_store(), Collections()).execute(
                OWNER, "plan-1", {"stage": "planted", "completed": "yes", "costs": {"fuel": 5}}
            )


class _BatchOutageStore(MemoryDocumentStore):
    async def write_batch(self, writes: Any) -> None:
        raise FirestoreUnavailableError("write_batch failed")


class TestCreateCropPlanAtomicity:
    """The plan and the farm aggregates are written together or not at all."""

    @pytest.mark.asyncio
    async def test_batch_outage_stores_no_plan(self) -> None:
        store = _BatchOutageStore(
            {"farms": {"farm-1": {"ownerId": "owner-1", "cropPlans": [], "totalPlannedArea": 1.0}}}
        )

        with pytest.raises(InternalError) as exc_info:
            await CreateCropPlanUseCase(store, Collections()).execute(OWNER, FARM, _plan_payload())

        assert exc_info.value.error == "Crop planning failed"
        assert store.count("cropPlans") == 0
        farm = await store.get("farms", "farm-1")
        assert farm["totalPlannedArea"] == 1.0
        assert farm["cropPlans"] == []

    @pytest.mark.asyncio
    async def test_farm_removed_before_write_stores_no_plan(self) -> None:
        store = MemoryDocumentStore({"cropPlans": {}})

        with pytest.raises(NotFoundError) as exc_info:
            await CreateCropPlanUseCase(store, Collections()).execute(OWNER, FARM, _plan_payload())

        assert exc_info.value.error == "Farm not found"
        assert store.count("cropPlans") == 0
