"""Use cases backed by the recommendation service."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from api.validators.crops import PESTICIDE_RULES, SOIL_ANALYSIS_RULES
from api.validators.rules import validate_or_raise
from app.domain._base import utcnow
from config.logging import log_business_event
from utils.errors import InfrastructureError, InternalError

if TYPE_CHECKING:
    from app.domain.claims import Claims
    from app.protocols.recommendation_service import RecommendationServiceProtocol

logger = logging.getLogger(__name__)

FERTILIZER_CROPS = 3
FERTILIZER_BUDGET_SHARE = 0.3
DEFAULT_SEASON = "current"

_SOIL_FIELDS = (
    "soilType",
    "phLevel",
    "nitrogen",
    "phosphorus",
    "potassium",
    "organicMatter",
    "moisture",
)


def _crop_name(crop: Any) -> str | None:
    """Ranked entries are objects carrying ``name``; bare strings are names."""
    if isinstance(crop, dict):
        name = crop.get("name")
        return name if isinstance(name, str) and name else None
    return crop if isinstance(crop, str) and crop else None


class CropRecommendationsUseCase:
    """Soil analysis, ranked crops and fertilizer plans for the top crops.

    Fertilizer requests for the top crops run concurrently, each with a
    fixed share of the budget. Every request is awaited before a failure
    is reported; entries without a crop name get no fertilizer plan.
    """

    def __init__(self, recommendations: RecommendationServiceProtocol) -> None:
        self._recommendations = recommendations

    async def execute(self, claims: Claims, payload: dict[str, Any]) -> dict[str, Any]:
        values = validate_or_raise(payload, SOIL_ANALYSIS_RULES)
        location = {
            **payload["location"],
            "lat": values["location.lat"],
            "lng": values["location.lng"],
        }
        season = values.get("season", DEFAULT_SEASON)
        budget = values.get("budget", 0.0)

        try:
            soil_analysis = await self._recommendations.analyze_soil(
                {"location": location, **{key: values[key] for key in _SOIL_FIELDS}}
            )
            recommendations = await self._recommendations.crop_recommendations(
                {
                    "soilAnalysis": soil_analysis,
                    "location": location,
                    "season": season,
                    "availableWater": payload.get("availableWater"),
                    "budget": budget,
                    "laborAvailability": payload.get("laborAvailability"),
                    "marketDemand": payload.get("marketDemand"),
                }
            )
            crop_names = [
                name
                for name in map(_crop_name, recommendations[:FERTILIZER_CROPS])
                if name is not None
            ]
            outcomes = await asyncio.gather(
                *(self._fertilizers_for(name, soil_analysis, budget) for name in crop_names),
                return_exceptions=True,
            )
            for outcome in outcomes:
                if isinstance(outcome, BaseException):
                    raise outcome
            fertilizer_recommendations = list(outcomes)
        except InfrastructureError as exc:
            logger.error("crop_recommendations_failed", extra={"error_type": type(exc).__name__})
            raise InternalError(
                "Unable to generate crop recommendations",
                error="Recommendation generation failed",
            ) from exc

        log_business_event(
            logger,
            "crops",
            "recommendations_generated",
            user_id=claims.uid,
            soil_type=values["soilType"],
            season=season,
        )

        return {
            "message": "Crop recommendations generated successfully",
            "soilAnalysis": soil_analysis,
            "recommendations": recommendations,
            "fertilizerRecommendations": fertilizer_recommendations,
            "timestamp": utcnow().isoformat(),
        }

    async def _fertilizers_for(
        self,
        name: str,
        soil_analysis: dict[str, Any],
        budget: float,
    ) -> dict[str, Any]:
        fertilizers = await self._recommendations.fertilizer_recommendations(
            {
                "crop": name,
                "soilAnalysis": soil_analysis,
                "budget": budget * FERTILIZER_BUDGET_SHARE,
            }
        )
        return {"crop": name, "fertilizers": fertilizers}


class PesticideRecommendationsUseCase:
    def __init__(self, recommendations: RecommendationServiceProtocol) -> None:
        self._recommendations = recommendations

    async def execute(self, claims: Claims, payload: dict[str, Any]) -> dict[str, Any]:
        values = validate_or_raise(payload, PESTICIDE_RULES)

        try:
            recommendations = await self._recommendations.pesticide_recommendations(values)
        except InfrastructureError as exc:
            logger.error("pesticide_recommendations_failed", extra={"error_type": type(exc).__name__})
            raise InternalError(
                "Unable to generate pesticide recommendations",
                error="Recommendation generation failed",
            ) from exc

        log_business_event(
            logger,
            "crops",
            "pesticide_recommendations",
            user_id=claims.uid,
            crop_id=values["cropId"],
            pest_type=values["pestType"],
            severity=values["severity"],
        )
        return {
            "message": "Pesticide recommendations generated successfully",
            "recommendations": recommendations,
        }
