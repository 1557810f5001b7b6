"""Identity provider adapters."""

from app.infra.identity.firebase_identity import FirebaseIdentityProvider

__all__ = ["FirebaseIdentityProvider"]
