"""Recommendation service settings.

Soil analysis, crop, fertilizer and pesticide recommendations are served by
an external HTTP service.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class RecommendationSettings:
    """Recommendation service settings.

    Attributes:
        base_url: Base URL of the recommendation service
        api_token: Bearer token sent to the service (optional)
        timeout_seconds: Request timeout
    """

    base_url: str = ""
    api_token: str = ""
    timeout_seconds: float = 15.0

    def validate(self) -> list[str]:
        """Validate recommendation settings."""
        errors: list[str] = []
        if not self.base_url:
            errors.append("RECOMMENDATION_SERVICE_URL not configured")
        elif not self.base_url.startswith(("http://", "https://")):
            errors.append("RECOMMENDATION_SERVICE_URL must be an http(s) URL")
        if self.timeout_seconds <= 0:
            errors.append("RECOMMENDATION_TIMEOUT_SECONDS must be > 0")
        return errors


def _load_recommendations_from_env() -> RecommendationSettings:
    """Load RecommendationSettings from environment variables."""
    return RecommendationSettings(
        base_url=os.getenv("RECOMMENDATION_SERVICE_URL", "").rstrip("/"),
        api_token=os.getenv("RECOMMENDATION_SERVICE_TOKEN", ""),
        timeout_seconds=float(os.getenv("RECOMMENDATION_TIMEOUT_SECONDS", "15")),
    )


@lru_cache(maxsize=1)
def get_recommendation_settings() -> RecommendationSettings:
    """Return the cached RecommendationSettings instance."""
    return _load_recommendations_from_env()
