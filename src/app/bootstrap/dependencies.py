"""Factories for the concrete adapters and the service container.

Reference: app/bootstrap is the only place that chooses implementations.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import (
    create_firebase_app,
    create_firestore_client,
    create_http_client,
)
from app.bootstrap.container import Collections, ServiceContainer
from app.infra.email import SmtpEmailTransport
from app.infra.identity import FirebaseIdentityProvider
from app.infra.recommendations import HttpRecommendationClient
from app.infra.stores import FirestoreDocumentStore, MemoryDocumentStore
from app.services import CredentialVerifier, NotificationDispatcher, RoomHub, SideEffectRunner
from config.settings import (
    get_base_settings,
    get_email_settings,
    get_firebase_settings,
    get_recommendation_settings,
)

if TYPE_CHECKING:
    from app.protocols.document_store import DocumentStoreProtocol
    from app.protocols.identity_provider import IdentityProviderProtocol

logger = logging.getLogger(__name__)


def create_document_store() -> DocumentStoreProtocol:
    """Create the document store selected by STORE_BACKEND.

    - "firestore": FirestoreDocumentStore (default)
    - "memory": MemoryDocumentStore (development only)
    """
    firebase = get_firebase_settings()
    base = get_base_settings()

    if firebase.store_backend == "memory":
        if not base.is_development:
            logger.warning(
                "memory_store_in_non_dev",
                extra={"backend": "memory", "environment": base.environment},
            )
        logger.info("document_store_created", extra={"backend": "memory"})
        return MemoryDocumentStore()

    store = FirestoreDocumentStore(
        create_firestore_client(),
        timeout_seconds=base.external_call_timeout_seconds,
    )
    logger.info("document_store_created", extra={"backend": "firestore"})
    return store


def create_identity_provider() -> IdentityProviderProtocol:
    return FirebaseIdentityProvider(
        create_firebase_app(),
        timeout_seconds=get_base_settings().external_call_timeout_seconds,
    )


def build_container() -> ServiceContainer:
    """Wire every adapter and service once."""
    base = get_base_settings()
    identity = create_identity_provider()
    http_client = create_http_client(get_recommendation_settings())

    container = ServiceContainer(
        settings=base,
        identity=identity,
        store=create_document_store(),
        verifier=CredentialVerifier(identity),
        notifier=NotificationDispatcher(
            SmtpEmailTransport(get_email_settings()),
            frontend_url=base.public_url,
        ),
        side_effects=SideEffectRunner(),
        recommendations=HttpRecommendationClient(http_client),
        rooms=RoomHub(),
        collections=Collections.from_settings(get_firebase_settings()),
        http_client=http_client,
    )
    logger.info("service_container_built", extra={"environment": base.environment})
    return container
