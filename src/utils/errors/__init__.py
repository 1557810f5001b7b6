"""Shared exceptions."""

from .exceptions import (
    AccessDenied,
    AppError,
    AuthenticationFailure,
    AuthenticationRequired,
    AuthorizationFailure,
    ConflictError,
    EmailDeliveryError,
    FirestoreUnavailableError,
    IdentityProviderError,
    InfrastructureError,
    InsufficientPermissions,
    InternalError,
    MissingToken,
    NotFoundError,
    PayloadTooLarge,
    RecommendationServiceError,
    TokenExpired,
    TokenInvalid,
    TokenRevoked,
    UserNotFound,
    ValidationFailure,
)

__all__ = [
    "AccessDenied",
    "AppError",
    "AuthenticationFailure",
    "AuthenticationRequired",
    "AuthorizationFailure",
    "ConflictError",
    "EmailDeliveryError",
    "FirestoreUnavailableError",
    "IdentityProviderError",
    "InfrastructureError",
    "InsufficientPermissions",
    "InternalError",
    "MissingToken",
    "NotFoundError",
    "PayloadTooLarge",
    "RecommendationServiceError",
    "TokenExpired",
    "TokenInvalid",
    "TokenRevoked",
    "UserNotFound",
    "ValidationFailure",
]
