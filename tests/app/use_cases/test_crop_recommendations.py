"""Tests for crop and pesticide recommendations."""

from __future__ import annotations

from typing import Any

import pytest

from app.domain.claims import Claims
from app.use_cases.crops import CropRecommendationsUseCase, PesticideRecommendationsUseCase
from tests.fakes.fake_recommendation_service import FakeRecommendationService
from utils.errors import InternalError, ValidationFailure

CLAIMS = Claims(uid="farmer-1")


def _soil(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "location": {"lat": 9.05, "lng": 7.49, "address": "Abuja"},
        "soilType": "loam",
        "phLevel": 6.4,
        "nitrogen": 40,
        "phosphorus": 22,
        "potassium": 180,
        "organicMatter": 3.1,
        "moisture": 28,
        "budget": 1000,
    }
    payload.update(overrides)
    return payload


class TestCropRecommendations:
    """Soil analysis, ranking and fertilizer fan-out."""

    @pytest.mark.asyncio
    async def test_fertilizers_for_top_three_crops(self) -> None:
        service = FakeRecommendationService()

        response = await CropRecommendationsUseCase(service).execute(CLAIMS, _soil())

        assert response["message"] == "Crop recommendations generated successfully"
        assert response["soilAnalysis"] == {"fertility": "medium", "ph": 6.4}
        assert len(response["recommendations"]) == 4
        assert [entry["crop"] for entry in response["fertilizerRecommendations"]] == [
            "maize",
            "cassava",
            "sorghum",
        ]
        assert {request["budget"] for request in service.fertilizer_requests} == {300.0}
        assert service.crop_requests[0]["season"] == "current"
        assert service.soil_requests[0]["location"]["address"] == "Abuja"

    @pytest.mark.asyncio
    async def test_no_crops_means_no_fertilizer_calls(self) -> None:
        service = FakeRecommendationService(crops=[])

        response = await CropRecommendationsUseCase(service).execute(
            CLAIMS, _soil(season="dry", budget=None)
        )

        assert response["fertilizerRecommendations"] == []
        assert service.fertilizer_requests == []
        assert service.crop_requests[0]["season"] == "dry"
        assert service.crop_requests[0]["budget"] == 0.0

    @pytest.mark.asyncio
    async def test_ph_out_of_range(self) -> None:
        with pytest.raises(ValidationFailure) as exc_info:
            await CropRecommendationsUseCase(FakeRecommendationService()).execute(
                CLAIMS, _soil(phLevel=15, moisture=-1)
            )

        fields = [detail["field"] for detail in exc_info.value.details]
        assert fields == ["phLevel", "moisture"]

    @pytest.mark.asyncio
    async def test_service_failure(self) -> None:
        with pytest.raises(InternalError) as exc_info:
            await CropRecommendationsUseCase(FakeRecommendationService(fail=True)).execute(
                CLAIMS, _soil()
            )
        assert exc_info.value.error == "Recommendation generation failed"

    @pytest.mark.asyncio
    async def test_entries_without_a_name_are_skipped(self) -> None:
        service = FakeRecommendationService(crops=["millet", {"score": 0.5}, 7, {"name": "yam"}])

        response = await CropRecommendationsUseCase(service).execute(CLAIMS, _soil())

        assert [entry["crop"] for entry in response["fertilizerRecommendations"]] == ["millet"]
        assert len(response["recommendations"]) == 4

    @pytest.mark.asyncio
    async def test_fertilizer_failure_waits_for_sibling_requests(self) -> None:
        """No fertilizer request is left running once the failure is reported."""
        service = FakeRecommendationService()
        service.fertilizer_fail_for = {"maize"}
        service.fertilizer_delay = 0.01

        with pytest.raises(InternalError) as exc_info:
            await CropRecommendationsUseCase(service).execute(CLAIMS, _soil())

        assert exc_info.value.error == "Recommendation generation failed"
        assert sorted(service.fertilizer_completed) == ["cassava", "sorghum"]


class TestPesticideRecommendations:
    @pytest.mark.asyncio
    async def test_passes_normalized_request(self) -> None:
        service = FakeRecommendationService()

        response = await PesticideRecommendationsUseCase(service).execute(
            CLAIMS,
            {"cropId": "maize", "pestType": "insects", "severity": "high", "budget": "250"},
        )

        assert response["recommendations"] == [{"name": "neem oil", "pestType": "insects"}]
        assert service.pesticide_requests == [
            {"cropId": "maize", "pestType": "insects", "severity": "high", "budget": 250.0}
        ]

    @pytest.mark.asyncio
    async def test_unknown_pest_type(self) -> None:
        with pytest.raises(ValidationFailure):
            await PesticideRecommendationsUseCase(FakeRecommendationService()).execute(
                CLAIMS,
                {"cropId": "maize", "pestType": "birds", "severity": "high", "budget": 10},
            )
