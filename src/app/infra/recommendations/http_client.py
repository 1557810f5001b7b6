"""HTTP client for the recommendation service.

Every endpoint takes a JSON body and answers ``{"data": ...}``; transport
errors, non-2xx answers and timeouts are raised as
``RecommendationServiceError`` so the route can answer a generic 500.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.protocols.recommendation_service import RecommendationServiceProtocol
from utils.errors import RecommendationServiceError

logger = logging.getLogger(__name__)

SOIL_ANALYSIS_PATH = "/soil/analyze"
CROP_RECOMMENDATIONS_PATH = "/crops/recommendations"
FERTILIZER_RECOMMENDATIONS_PATH = "/fertilizers/recommendations"
PESTICIDE_RECOMMENDATIONS_PATH = "/pesticides/recommendations"


class HttpRecommendationClient(RecommendationServiceProtocol):
    """Recommendation service reached over HTTP.

    Args:
        http_client: Shared async HTTP client (base_url, timeout and auth
            headers configured by the bootstrap)
    """

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    async def _post(self, path: str, payload: dict[str, Any]) -> Any:
        try:
            response = await self._http.post(path, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as exc:
            logger.warning("recommendation_timeout", extra={"path": path})
            raise RecommendationServiceError(f"{path} timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "recommendation_http_error",
                extra={"path": path, "status_code": exc.response.status_code},
            )
            raise RecommendationServiceError(f"{path} answered {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "recommendation_call_failed",
                extra={"path": path, "error_type": type(exc).__name__},
            )
            raise RecommendationServiceError(f"{path} failed") from exc

        if isinstance(data, dict) and "data" in data:
            return data["data"]
        return data

    async def analyze_soil(self, sample: dict[str, Any]) -> dict[str, Any]:
        result = await self._post(SOIL_ANALYSIS_PATH, sample)
        return result if isinstance(result, dict) else {}

    async def crop_recommendations(self, request: dict[str, Any]) -> list[dict[str, Any]]:
        result = await self._post(CROP_RECOMMENDATIONS_PATH, request)
        return result if isinstance(result, list) else []

    async def fertilizer_recommendations(self, request: dict[str, Any]) -> list[dict[str, Any]]:
        result = await self._post(FERTILIZER_RECOMMENDATIONS_PATH, request)
        return result if isinstance(result, list) else []

    async def pesticide_recommendations(self, request: dict[str, Any]) -> list[dict[str, Any]]:
        result = await self._post(PESTICIDE_RECOMMENDATIONS_PATH, request)
        return result if isinstance(result, list) else []

    async def aclose(self) -> None:
        await self._http.aclose()
