"""Recommendation service double with canned answers."""

from __future__ import annotations

import asyncio
from typing import Any

from utils.errors import RecommendationServiceError

DEFAULT_CROPS = [
    {"name": "maize", "score": 0.92},
    {"name": "cassava", "score": 0.88},
    {"name": "sorghum", "score": 0.81},
    {"name": "millet", "score": 0.7},
]


class FakeRecommendationService:
    def __init__(self, crops: list[Any] | None = None, *, fail: bool = False) -> None:
        self.crops = DEFAULT_CROPS if crops is None else crops
        self.fail = fail
        self.soil_requests: list[dict[str, Any]] = []
        self.crop_requests: list[dict[str, Any]] = []
        self.fertilizer_requests: list[dict[str, Any]] = []
        self.pesticide_requests: list[dict[str, Any]] = []
        self.fertilizer_fail_for: set[str] = set()
        self.fertilizer_delay = 0.0
        self.fertilizer_completed: list[str] = []

    def _check(self) -> None:
        if self.fail:
            raise RecommendationServiceError("recommendation service unavailable")

    async def analyze_soil(self, sample: dict[str, Any]) -> dict[str, Any]:
        self._check()
        self.soil_requests.append(sample)
        return {"fertility": "medium", "ph": sample.get("phLevel")}

    async def crop_recommendations(self, request: dict[str, Any]) -> list[dict[str, Any]]:
        self._check()
        self.crop_requests.append(request)
        return list(self.crops)

    async def fertilizer_recommendations(self, request: dict[str, Any]) -> list[dict[str, Any]]:
        self._check()
        self.fertilizer_requests.append(request)
        if request["crop"] in self.fertilizer_fail_for:
            raise RecommendationServiceError("fertilizer model unavailable")
        if self.fertilizer_delay:
            await asyncio.sleep(self.fertilizer_delay)
        self.fertilizer_completed.append(request["crop"])
        return [{"name": "NPK 15-15-15", "crop": request["crop"]}]

    async def pesticide_recommendations(self, request: dict[str, Any]) -> list[dict[str, Any]]:
        self._check()
        self.pesticide_requests.append(request)
        return [{"name": "neem oil", "pestType": request["pestType"]}]
