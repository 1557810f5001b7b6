"""Contracts between the core services and the external collaborators."""

from .document_store import DocumentStoreProtocol, DocumentWrite
from .email_transport import EmailMessage, EmailTransportProtocol
from .identity_provider import IdentityAccount, IdentityProviderProtocol
from .recommendation_service import RecommendationServiceProtocol

__all__ = [
    "DocumentStoreProtocol",
    "DocumentWrite",
    "EmailMessage",
    "EmailTransportProtocol",
    "IdentityAccount",
    "IdentityProviderProtocol",
    "RecommendationServiceProtocol",
]
