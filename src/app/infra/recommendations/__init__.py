"""Recommendation service adapters."""

from app.infra.recommendations.http_client import HttpRecommendationClient

__all__ = ["HttpRecommendationClient"]
