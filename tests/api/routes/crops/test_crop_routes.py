"""Tests for the /api/crops routes through the ASGI app."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.app import create_app
from app.infra.stores.memory_document_store import MemoryDocumentStore
from tests.fakes.container import build_test_container
from tests.fakes.fake_identity_provider import FakeIdentityProvider
from tests.fakes.fake_recommendation_service import FakeRecommendationService
from utils.errors import TokenExpired

OWNER = {"Authorization": "Bearer owner-token"}
MEMBER = {"Authorization": "Bearer member-token"}
ADMIN = {"Authorization": "Bearer admin-token"}
OUTSIDER = {"Authorization": "Bearer outsider-token"}

PLAN = {
    "farmId": "farm-1",
    "season": "rainy",
    "availableWater": 900,
    "budget": 2000,
    "laborAvailability": "high",
    "marketDemand": {"cassava": "medium"},
    "cropId": "cassava",
    "area": 1.5,
    "plantingDate": "2025-05-01",
    "expectedHarvestDate": "2026-02-01",
}


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore(
        {
            "farms": {
                "farm-1": {"ownerId": "owner-1", "members": ["member-1"], "totalPlannedArea": 0},
            },
            "crops": {"cassava": {"name": "Cassava", "harvestTime": "9-12 months"}},
            "cropPlans": {
                "plan-1": {
                    "farmId": "farm-1",
                    "userId": "owner-1",
                    "cropId": "cassava",
                    "area": 2,
                    "status": "growing",
                    "plantingDate": "2025-02-01T00:00:00Z",
                    "costs": {"total": 0},
                }
            },
        }
    )


@pytest.fixture
def identity() -> FakeIdentityProvider:
    provider = FakeIdentityProvider()
    provider.add_token("owner-token", {"uid": "owner-1"})
    provider.add_token("member-token", {"uid": "member-1"})
    provider.add_token("admin-token", {"uid": "ops-1", "role": "admin"})
    provider.add_token("outsider-token", {"uid": "stranger"})
    provider.add_token("expired-token", TokenExpired())
    return provider


@pytest.fixture
def recommendations() -> FakeRecommendationService:
    return FakeRecommendationService()


@pytest.fixture
def client(
    identity: FakeIdentityProvider,
    store: MemoryDocumentStore,
    recommendations: FakeRecommendationService,
) -> Iterator[TestClient]:
    services = build_test_container(identity=identity, store=store, recommendations=recommendations)
    with TestClient(create_app(services)) as test_client:
        yield test_client


class TestAuthentication:
    """Every crop route requires a verified bearer token."""

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("post", "/api/crops/recommendations"),
            ("post", "/api/crops/plan"),
            ("put", "/api/crops/plan/plan-1/progress"),
            ("post", "/api/crops/pesticides"),
            ("get", "/api/crops/calendar/farm-1"),
            ("get", "/api/crops/stats/farm-1"),
            ("get", "/api/crops/cassava"),
        ],
    )
    def test_missing_token(self, client: TestClient, method: str, path: str) -> None:
        response = client.request(method.upper(), path, json={} if method != "get" else None)

        assert response.status_code == 401
        assert response.json() == {
            "error": "Access token required",
            "message": "No authorization token provided",
        }

    def test_expired_token(self, client: TestClient) -> None:
        response = client.get("/api/crops/cassava", headers={"Authorization": "Bearer expired-token"})
        assert response.status_code == 401
        assert response.json()["error"] == "Token expired"

    def test_forged_token(self, client: TestClient) -> None:
        response = client.get("/api/crops/cassava", headers={"Authorization": "Bearer forged"})
        assert response.status_code == 403
        assert response.json()["error"] == "Invalid token"

    def test_denied_request_logged_as_warning_with_caller(
        self,
        client: TestClient,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.INFO, logger="api.middleware"):
            client.post("/api/crops/plan", json=PLAN, headers=OUTSIDER)

        access = [record for record in caplog.records if record.getMessage() == "http_request"]
        assert access[-1].levelno == logging.WARNING
        assert access[-1].status_code == 403
        assert access[-1].user_id == "stranger"

    def test_guard_runs_before_validation(self, client: TestClient) -> None:
        """An unauthenticated request with a bad body is rejected as 401, not 400."""
        response = client.post("/api/crops/plan", json={"season": "monsoon"})
        assert response.status_code == 401


class TestCropPlanRoute:
    """POST /api/crops/plan with farm access."""

    @pytest.mark.parametrize("headers", [OWNER, MEMBER, ADMIN])
    def test_owner_member_admin_can_plan(
        self,
        client: TestClient,
        store: MemoryDocumentStore,
        headers: dict[str, str],
    ) -> None:
        response = client.post("/api/crops/plan", json=PLAN, headers=headers)

        assert response.status_code == 201
        plan_id = response.json()["cropPlan"]["id"]
        assert plan_id.startswith("farm-1_cassava_")
        assert store.count("cropPlans") == 2

    def test_outsider_forbidden_and_nothing_written(
        self,
        client: TestClient,
        store: MemoryDocumentStore,
    ) -> None:
        response = client.post("/api/crops/plan", json=PLAN, headers=OUTSIDER)

        assert response.status_code == 403
        assert response.json()["message"] == "You do not have access to this farm"
        assert store.count("cropPlans") == 1

    def test_unknown_farm(self, client: TestClient) -> None:
        response = client.post("/api/crops/plan", json={**PLAN, "farmId": "farm-9"}, headers=ADMIN)
        assert response.status_code == 404
        assert response.json()["error"] == "Farm not found"

    def test_missing_farm_id(self, client: TestClient) -> None:
        body = {key: value for key, value in PLAN.items() if key != "farmId"}
        response = client.post("/api/crops/plan", json=body, headers=OWNER)
        assert response.status_code == 400
        assert response.json()["error"] == "Farm ID required"

    def test_missing_farm_id_reported_before_field_errors(self, client: TestClient) -> None:
        body = {key: value for key, value in PLAN.items() if key != "farmId"}
        body.update(season="monsoon", budget=-5, area="wide")

        response = client.post("/api/crops/plan", json=body, headers=OWNER)

        assert response.status_code == 400
        assert response.json()["error"] == "Farm ID required"
        assert "details" not in response.json()

    def test_invalid_plan_lists_all_fields(self, client: TestClient) -> None:
        response = client.post(
            "/api/crops/plan",
            json={**PLAN, "budget": -5, "laborAvailability": "none"},
            headers=OWNER,
        )

        assert response.status_code == 400
        fields = [detail["field"] for detail in response.json()["details"]]
        assert fields == ["budget", "laborAvailability"]


class TestProgressRoute:
    """PUT /api/crops/plan/{plan_id}/progress."""

    def test_costs_add_up(self, client: TestClient, store: MemoryDocumentStore) -> None:
        for amount in (10, 5):
            response = client.put(
                "/api/crops/plan/plan-1/progress",
                json={"stage": "planted", "completed": True, "costs": {"seeds": amount}},
                headers=OWNER,
            )
            assert response.status_code == 200

        plan = asyncio.run(store.get("cropPlans", "plan-1"))
        assert plan["costs"]["seeds"] == 15
        assert plan["costs"]["total"] == 15
        assert plan["progress"]["planted"] is True

    def test_member_without_farm_claim_denied(self, client: TestClient) -> None:
        response = client.put(
            "/api/crops/plan/plan-1/progress",
            json={"stage": "planted", "completed": True},
            headers=MEMBER,
        )
        assert response.status_code == 403

    def test_unknown_plan(self, client: TestClient) -> None:
        response = client.put(
            "/api/crops/plan/nope/progress",
            json={"stage": "planted", "completed": True},
            headers=OWNER,
        )
        assert response.status_code == 404


class TestRecommendationRoutes:
    """Recommendation endpoints delegate to the recommendation service."""

    def test_crop_recommendations(self, client: TestClient) -> None:
        payload: dict[str, Any] = {
            "location": {"lat": 7.4, "lng": 3.9},
            "soilType": "sandy loam",
            "phLevel": 6.0,
            "nitrogen": 20,
            "phosphorus": 15,
            "potassium": 100,
            "organicMatter": 2,
            "moisture": 30,
        }

        response = client.post("/api/crops/recommendations", json=payload, headers=MEMBER)

        assert response.status_code == 200
        assert len(response.json()["fertilizerRecommendations"]) == 3

    def test_recommendation_service_outage(
        self,
        client: TestClient,
        recommendations: FakeRecommendationService,
    ) -> None:
        recommendations.fail = True

        response = client.post(
            "/api/crops/pesticides",
            json={"cropId": "cassava", "pestType": "diseases", "severity": "low", "budget": 50},
            headers=OWNER,
        )

        assert response.status_code == 500
        assert response.json()["error"] == "Recommendation generation failed"


class TestReadRoutes:
    """Details, calendar and statistics."""

    def test_crop_details(self, client: TestClient) -> None:
        response = client.get("/api/crops/cassava", headers=OUTSIDER)

        assert response.status_code == 200
        assert response.json()["growingGuide"]["harvestTime"] == "9-12 months"

    def test_unknown_crop(self, client: TestClient) -> None:
        response = client.get("/api/crops/quinoa", headers=OWNER)
        assert response.status_code == 404

    def test_calendar_is_farm_scoped(self, client: TestClient) -> None:
        allowed = client.get("/api/crops/calendar/farm-1?year=2025", headers=MEMBER)
        denied = client.get("/api/crops/calendar/farm-1", headers=OUTSIDER)

        assert allowed.status_code == 200
        assert [entry["id"] for entry in allowed.json()["calendar"]] == ["plan-1"]
        assert denied.status_code == 403

    def test_calendar_rejects_bad_year(self, client: TestClient) -> None:
        response = client.get("/api/crops/calendar/farm-1?year=soon", headers=OWNER)
        assert response.status_code == 400

    def test_statistics(self, client: TestClient) -> None:
        response = client.get("/api/crops/stats/farm-1?period=year", headers=ADMIN)

        assert response.status_code == 200
        body = response.json()
        assert body["period"] == "year"
        assert body["stats"]["totalPlans"] == 1
        assert body["stats"]["topCrops"] == [{"cropId": "cassava", "count": 1}]
        assert body["stats"]["monthlyBreakdown"]["1"]["plans"] == 1
