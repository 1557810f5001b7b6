"""Service container built once at startup.

Handlers receive the container by injection; nothing below reads
module-level client state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from app.protocols.document_store import DocumentStoreProtocol
    from app.protocols.identity_provider import IdentityProviderProtocol
    from app.protocols.recommendation_service import RecommendationServiceProtocol
    from app.services.credential_verifier import CredentialVerifier
    from app.services.notifications import NotificationDispatcher
    from app.services.rooms import RoomHub
    from app.services.side_effects import SideEffectRunner
    from config.settings import BaseSettings, FirebaseSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Collections:
    """Document store collection names."""

    users: str = "users"
    farms: str = "farms"
    crops: str = "crops"
    crop_plans: str = "cropPlans"

    @classmethod
    def from_settings(cls, settings: FirebaseSettings) -> Collections:
        return cls(
            users=settings.collection_users,
            farms=settings.collection_farms,
            crops=settings.collection_crops,
            crop_plans=settings.collection_crop_plans,
        )


@dataclass(frozen=True, slots=True)
class ServiceContainer:
    settings: BaseSettings
    identity: IdentityProviderProtocol
    store: DocumentStoreProtocol
    verifier: CredentialVerifier
    notifier: NotificationDispatcher
    side_effects: SideEffectRunner
    recommendations: RecommendationServiceProtocol
    rooms: RoomHub
    collections: Collections = Collections()
    http_client: httpx.AsyncClient | None = None

    async def aclose(self, drain_timeout_seconds: float = 30.0) -> None:
        """Drain pending side effects, then release the HTTP client."""
        await self.side_effects.drain(drain_timeout_seconds)
        if self.http_client is not None:
            await self.http_client.aclose()
        logger.info("service_container_closed")
