"""Firebase settings.

Credentials for the identity provider (Firebase Authentication) and the
document store (Cloud Firestore), plus the collection names the routes use.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

StoreBackend = Literal["firestore", "memory"]


@dataclass(frozen=True)
class FirebaseSettings:
    """Firebase project settings.

    Either ``credentials_file`` or the inline service-account fields
    (``client_email`` + ``private_key``) must be set outside development.
    When neither is set, Application Default Credentials are used.

    Attributes:
        project_id: Firebase/GCP project id
        credentials_file: Path to a service-account JSON file
        client_email: Service-account email (inline credentials)
        private_key: Service-account private key (inline credentials)
        private_key_id: Service-account key id
        client_id: Service-account client id
        storage_bucket: Default storage bucket
        store_backend: Document store backend (firestore|memory)
        collection_users: Collection holding user profiles
        collection_farms: Collection holding farms
        collection_crops: Collection holding the crop catalogue
        collection_crop_plans: Collection holding crop plans
    """

    project_id: str = ""
    credentials_file: str = ""
    client_email: str = ""
    private_key: str = ""
    private_key_id: str = ""
    client_id: str = ""
    storage_bucket: str = ""
    store_backend: StoreBackend = "firestore"
    collection_users: str = "users"
    collection_farms: str = "farms"
    collection_crops: str = "crops"
    collection_crop_plans: str = "cropPlans"

    @property
    def has_inline_credentials(self) -> bool:
        """Return True when the service account is given field by field."""
        return bool(self.client_email and self.private_key)

    def service_account_info(self) -> dict[str, str]:
        """Build the service-account mapping expected by firebase_admin."""
        return {
            "type": "service_account",
            "project_id": self.project_id,
            "private_key_id": self.private_key_id,
            "private_key": self.private_key,
            "client_email": self.client_email,
            "client_id": self.client_id,
            "token_uri": "https://oauth2.googleapis.com/token",
        }

    def validate(self, is_development: bool) -> list[str]:
        """Validate Firebase settings.

        Args:
            is_development: Whether the process runs in development.

        Returns:
            List of problems.
        """
        errors: list[str] = []

        if not self.project_id:
            errors.append("FIREBASE_PROJECT_ID must be set")

        if self.store_backend not in ("firestore", "memory"):
            errors.append(f"invalid STORE_BACKEND: {self.store_backend}")

        if self.store_backend == "memory" and not is_development:
            errors.append("STORE_BACKEND=memory is forbidden in staging/production")

        if not is_development and not (self.credentials_file or self.has_inline_credentials):
            errors.append(
                "FIREBASE_CREDENTIALS_FILE or FIREBASE_CLIENT_EMAIL/FIREBASE_PRIVATE_KEY "
                "must be set"
            )

        return errors


def _load_firebase_from_env() -> FirebaseSettings:
    """Load FirebaseSettings from environment variables."""
    backend_str = os.getenv("STORE_BACKEND", "firestore").lower()
    backend: StoreBackend = "memory" if backend_str == "memory" else "firestore"
    return FirebaseSettings(
        project_id=os.getenv("FIREBASE_PROJECT_ID", os.getenv("GOOGLE_CLOUD_PROJECT", "")),
        credentials_file=os.getenv("FIREBASE_CREDENTIALS_FILE", ""),
        client_email=os.getenv("FIREBASE_CLIENT_EMAIL", ""),
        # Keys stored in env files carry literal "\n" sequences
        private_key=os.getenv("FIREBASE_PRIVATE_KEY", "").replace("\\n", "\n"),
        private_key_id=os.getenv("FIREBASE_PRIVATE_KEY_ID", ""),
        client_id=os.getenv("FIREBASE_CLIENT_ID", ""),
        storage_bucket=os.getenv("FIREBASE_STORAGE_BUCKET", ""),
        store_backend=backend,
        collection_users=os.getenv("FIRESTORE_COLLECTION_USERS", "users"),
        collection_farms=os.getenv("FIRESTORE_COLLECTION_FARMS", "farms"),
        collection_crops=os.getenv("FIRESTORE_COLLECTION_CROPS", "crops"),
        collection_crop_plans=os.getenv("FIRESTORE_COLLECTION_CROP_PLANS", "cropPlans"),
    )


@lru_cache(maxsize=1)
def get_firebase_settings() -> FirebaseSettings:
    """Return the cached FirebaseSettings instance."""
    return _load_firebase_from_env()
