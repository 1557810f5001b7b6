"""Infrastructure settings aggregator."""

from __future__ import annotations

from config.settings.infra.firebase import (
    FirebaseSettings,
    StoreBackend,
    get_firebase_settings,
)

__all__ = [
    "FirebaseSettings",
    "StoreBackend",
    "get_firebase_settings",
]
