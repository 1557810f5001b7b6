"""Protocol for the external recommendation services.

Soil analysis, crop, fertilizer and pesticide recommendations are computed
outside this service; payloads are passed through as JSON mappings.
"""

from __future__ import annotations

from typing import Any, Protocol


class RecommendationServiceProtocol(Protocol):
    """Contract for the recommendation backend."""

    async def analyze_soil(self, sample: dict[str, Any]) -> dict[str, Any]: ...

    async def crop_recommendations(self, request: dict[str, Any]) -> list[dict[str, Any]]: ...

    async def fertilizer_recommendations(
        self, request: dict[str, Any]
    ) -> list[dict[str, Any]]: ...

    async def pesticide_recommendations(
        self, request: dict[str, Any]
    ) -> list[dict[str, Any]]: ...
