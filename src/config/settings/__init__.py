"""SmartAgriNet settings aggregator.

Re-exports every settings class and loader, grouped by concern.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    VALID_LOG_LEVELS,
    BaseSettings,
    Environment,
    get_base_settings,
)

# Email transport
from config.settings.email import EmailSettings, get_email_settings

# Infrastructure settings
from config.settings.infra import (
    FirebaseSettings,
    StoreBackend,
    get_firebase_settings,
)

# Recommendation service
from config.settings.recommendations import (
    RecommendationSettings,
    get_recommendation_settings,
)

__all__ = [
    "VALID_LOG_LEVELS",
    # Base
    "BaseSettings",
    # Email
    "EmailSettings",
    "Environment",
    # Infrastructure
    "FirebaseSettings",
    # Recommendations
    "RecommendationSettings",
    "StoreBackend",
    "get_base_settings",
    "get_email_settings",
    "get_firebase_settings",
    "get_recommendation_settings",
]
