"""Use cases for login, password reset, email verification and tokens."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from api.validators.auth import FORGOT_PASSWORD_RULES, LOGIN_RULES
from api.validators.rules import validate_or_raise
from app.domain._base import utcnow
from config.logging import log_business_event
from utils.errors import (
    AuthenticationFailure,
    InfrastructureError,
    InternalError,
    NotFoundError,
    UserNotFound,
    ValidationFailure,
)

if TYPE_CHECKING:
    from app.bootstrap.container import Collections
    from app.protocols.document_store import DocumentStoreProtocol
    from app.protocols.identity_provider import IdentityProviderProtocol
    from app.services.notifications import NotificationDispatcher
    from app.services.side_effects import SideEffectRunner

logger = logging.getLogger(__name__)

PASSWORD_RESET_MESSAGE = "If an account exists with this email, a password reset link has been sent"


class LoginUseCase:
    """Resolves the account, stamps the login and mints a custom token.

    Credentials are checked by the client against the identity provider;
    this step only maps the account to its profile.
    """

    def __init__(
        self,
        identity: IdentityProviderProtocol,
        store: DocumentStoreProtocol,
        collections: Collections,
    ) -> None:
        self._identity = identity
        self._store = store
        self._collections = collections

    async def execute(self, payload: dict[str, Any]) -> dict[str, Any]:
        values = validate_or_raise(payload, LOGIN_RULES)
        email = values["email"]

        try:
            account = await self._identity.get_user_by_email(email)
        except UserNotFound as exc:
            raise AuthenticationFailure(
                "Invalid email or password",
                error="Authentication failed",
            ) from exc

        try:
            profile = await self._store.get(self._collections.users, account.uid)
            if profile is None:
                raise NotFoundError("User profile not found", error="User not found")

            now = utcnow()
            await self._store.update(
                self._collections.users,
                account.uid,
                fields={"lastLoginAt": now, "updatedAt": now},
            )
            token = await self._identity.create_custom_token(account.uid)
        except InfrastructureError as exc:
            logger.error("login_failed", extra={"error_type": type(exc).__name__})
            raise InternalError("Unable to process login", error="Login failed") from exc

        log_business_event(
            logger,
            "auth",
            "user_login",
            user_id=account.uid,
            email=email,
            role=profile.get("role"),
        )

        return {
            "message": "Login successful",
            "user": {
                "uid": account.uid,
                "email": account.email,
                "displayName": account.display_name,
                "role": profile.get("role"),
                "language": profile.get("language"),
                "location": profile.get("location"),
            },
            "token": token,
        }


class RequestPasswordResetUseCase:
    """Answers identically whether or not the account exists.

    When it exists, the reset link is generated and the email is scheduled.
    Provider failures are logged and answered with the same message, since
    they can only happen on the existing-account path.
    """

    def __init__(
        self,
        identity: IdentityProviderProtocol,
        notifier: NotificationDispatcher,
        side_effects: SideEffectRunner,
    ) -> None:
        self._identity = identity
        self._notifier = notifier
        self._side_effects = side_effects

    async def execute(self, payload: dict[str, Any]) -> dict[str, Any]:
        values = validate_or_raise(payload, FORGOT_PASSWORD_RULES)
        email = values["email"]

        try:
            account = await self._identity.get_user_by_email(email)
            reset_link = await self._identity.generate_password_reset_link(email)
        except UserNotFound:
            logger.info("password_reset_unknown_account")
        except InfrastructureError as exc:
            logger.error("password_reset_failed", extra={"error_type": type(exc).__name__})
        else:
            self._side_effects.schedule(
                "password_reset_email",
                self._notifier.send_password_reset(email, reset_link),
            )
            log_business_event(
                logger,
                "auth",
                "password_reset_requested",
                user_id=account.uid,
                email=email,
            )

        return {"message": PASSWORD_RESET_MESSAGE}


class VerifyEmailUseCase:
    def __init__(self, identity: IdentityProviderProtocol) -> None:
        self._identity = identity

    async def execute(self, payload: dict[str, Any]) -> dict[str, Any]:
        token = payload.get("token")
        if not token or not isinstance(token, str):
            raise ValidationFailure("Verification token is required", error="Token required")

        try:
            decoded = await self._identity.verify_id_token(token)
            await self._identity.mark_email_verified(decoded["uid"])
        except (AuthenticationFailure, InfrastructureError, UserNotFound, KeyError) as exc:
            logger.warning("email_verification_failed", extra={"error_type": type(exc).__name__})
            raise ValidationFailure(
                "Invalid or expired verification token",
                error="Email verification failed",
            ) from exc

        log_business_event(
            logger,
            "auth",
            "email_verified",
            user_id=decoded["uid"],
            email=decoded.get("email"),
        )
        return {"message": "Email verified successfully"}


class RefreshTokenUseCase:
    def __init__(self, identity: IdentityProviderProtocol) -> None:
        self._identity = identity

    async def execute(self, payload: dict[str, Any]) -> dict[str, Any]:
        refresh_token = payload.get("refreshToken")
        if not refresh_token or not isinstance(refresh_token, str):
            raise ValidationFailure("Refresh token is required", error="Refresh token required")

        try:
            decoded = await self._identity.verify_id_token(refresh_token)
            token = await self._identity.create_custom_token(decoded["uid"])
        except (AuthenticationFailure, InfrastructureError, KeyError) as exc:
            logger.warning("token_refresh_failed", extra={"error_type": type(exc).__name__})
            raise AuthenticationFailure(
                "Invalid or expired refresh token",
                error="Token refresh failed",
            ) from exc

        return {"message": "Token refreshed successfully", "token": token}


class LogoutUseCase:
    """Tokens are discarded client side; only the event is recorded."""

    async def execute(self, payload: dict[str, Any]) -> dict[str, Any]:
        uid = payload.get("uid")
        if uid:
            log_business_event(logger, "auth", "user_logout", user_id=uid)
        return {"message": "Logout successful"}
