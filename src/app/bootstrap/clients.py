"""External client factories: Firebase app, Firestore client, HTTP client."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

import httpx

from config.settings import get_firebase_settings

if TYPE_CHECKING:
    from firebase_admin import App
    from google.cloud.firestore import Client as FirestoreClient

    from config.settings import RecommendationSettings

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Firebase
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def create_firebase_app() -> App:
    """Initialize the firebase_admin App (singleton).

    Credential precedence: credentials file, inline service account fields,
    application default credentials.
    """
    import firebase_admin
    from firebase_admin import credentials

    settings = get_firebase_settings()
    if settings.credentials_file:
        credential = credentials.Certificate(settings.credentials_file)
        source = "file"
    elif settings.has_inline_credentials:
        credential = credentials.Certificate(settings.service_account_info())
        source = "inline"
    else:
        credential = credentials.ApplicationDefault()
        source = "application_default"

    options = {"projectId": settings.project_id} if settings.project_id else {}
    if settings.storage_bucket:
        options["storageBucket"] = settings.storage_bucket

    app = firebase_admin.initialize_app(credential, options)
    logger.info(
        "firebase_app_initialized",
        extra={"project": settings.project_id, "credential_source": source},
    )
    return app


@lru_cache(maxsize=1)
def create_firestore_client() -> FirestoreClient:
    """Create the Firestore client (singleton)."""
    from google.cloud import firestore
    from google.oauth2 import service_account

    settings = get_firebase_settings()
    if settings.credentials_file:
        creds = service_account.Credentials.from_service_account_file(settings.credentials_file)
    elif settings.has_inline_credentials:
        creds = service_account.Credentials.from_service_account_info(
            settings.service_account_info()
        )
    else:
        creds = None

    client = firestore.Client(project=settings.project_id or None, credentials=creds)
    logger.info("firestore_client_created", extra={"project": settings.project_id})
    return client


# ──────────────────────────────────────────────────────────────────────────────
# HTTP
# ──────────────────────────────────────────────────────────────────────────────


def create_http_client(settings: RecommendationSettings) -> httpx.AsyncClient:
    """Create the AsyncClient used for the recommendation service."""
    headers = {"Accept": "application/json"}
    if settings.api_token:
        headers["Authorization"] = f"Bearer {settings.api_token}"
    client = httpx.AsyncClient(
        base_url=settings.base_url,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers=headers,
    )
    logger.info("http_client_created", extra={"base_url": settings.base_url})
    return client
