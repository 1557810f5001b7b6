"""Error taxonomy shared by the services and the API layer.

``AppError`` subclasses carry everything needed to render the JSON error
body ``{error, message, details?}``; infrastructure errors are raised by the
adapters and surface to callers as a generic internal failure.
"""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base for failures that map to an HTTP response.

    Args:
        message: Human readable message.
        error: Machine readable short code (defaults to the class default).
        details: Optional structured details (e.g. field violations).
    """

    status_code: int = 500
    default_error: str = "Internal server error"
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        *,
        error: str | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.error = error or self.default_error
        self.details = details
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        """Render the JSON error body."""
        body: dict[str, Any] = {"error": self.error, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationFailure(AppError):
    """Request payload failed one or more field rules (400)."""

    status_code = 400
    default_error = "Validation failed"
    default_message = "Request payload failed validation"


# ──────────────────────────────────────────────────────────────────────────────
# Authentication (401/403)
# ──────────────────────────────────────────────────────────────────────────────


class AuthenticationFailure(AppError):
    """Base for credential problems."""

    status_code = 401
    default_error = "Authentication failed"
    default_message = "Unable to authenticate request"
    reason = "authentication_failed"


class MissingToken(AuthenticationFailure):
    """No ``Authorization: Bearer <token>`` header."""

    default_error = "Access token required"
    default_message = "No authorization token provided"
    reason = "missing_token"


class TokenExpired(AuthenticationFailure):
    """Token verified but expired."""

    default_error = "Token expired"
    default_message = "Your session has expired. Please login again."
    reason = "token_expired"


class TokenRevoked(AuthenticationFailure):
    """Token verified but revoked by the identity provider."""

    default_error = "Token revoked"
    default_message = "Your session has been revoked. Please login again."
    reason = "token_revoked"


class TokenInvalid(AuthenticationFailure):
    """Malformed or otherwise unverifiable token."""

    status_code = 403
    default_error = "Invalid token"
    default_message = "Invalid or malformed authorization token"
    reason = "token_invalid"


class AuthenticationRequired(AuthenticationFailure):
    """A guard needs claims but the request is unauthenticated."""

    default_error = "Authentication required"
    default_message = "User must be authenticated"
    reason = "authentication_required"


# ──────────────────────────────────────────────────────────────────────────────
# Authorization (403)
# ──────────────────────────────────────────────────────────────────────────────


class AuthorizationFailure(AppError):
    """Base for permission problems."""

    status_code = 403
    default_error = "Access denied"
    default_message = "You do not have access to this resource"


class InsufficientPermissions(AuthorizationFailure):
    """Role not in the allowed set."""

    default_error = "Insufficient permissions"

    def __init__(self, allowed_roles: tuple[str, ...] | list[str]) -> None:
        self.allowed_roles = tuple(allowed_roles)
        super().__init__(f"Access denied. Required role: {' or '.join(self.allowed_roles)}")


class AccessDenied(AuthorizationFailure):
    """Requester is not owner, member or admin of the resource."""


# ──────────────────────────────────────────────────────────────────────────────
# Other outcomes
# ──────────────────────────────────────────────────────────────────────────────


class NotFoundError(AppError):
    """Resource absent (404)."""

    status_code = 404
    default_error = "Not found"
    default_message = "The requested resource does not exist"


class ConflictError(AppError):
    """Resource already exists (409)."""

    status_code = 409
    default_error = "Conflict"
    default_message = "The resource already exists"


class PayloadTooLarge(AppError):
    """Request body above the configured limit (413)."""

    status_code = 413
    default_error = "Payload too large"
    default_message = "Request body exceeds the allowed size"


class InternalError(AppError):
    """Unexpected or external-dependency failure (500)."""


# ──────────────────────────────────────────────────────────────────────────────
# Infrastructure
# ──────────────────────────────────────────────────────────────────────────────


class InfrastructureError(RuntimeError):
    """Base for external dependency failures."""


class FirestoreUnavailableError(InfrastructureError):
    """Document store call failed or timed out."""


class IdentityProviderError(InfrastructureError):
    """Identity provider call failed or timed out."""


class UserNotFound(Exception):
    """Identity provider has no account for the lookup key."""


class EmailDeliveryError(InfrastructureError):
    """SMTP transport refused or failed to deliver a message."""


class RecommendationServiceError(InfrastructureError):
    """Recommendation service returned an error or timed out."""
