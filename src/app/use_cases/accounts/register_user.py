"""Use case for account registration."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from api.validators.auth import REGISTRATION_RULES
from api.validators.rules import validate_or_raise
from app.domain.claims import DEFAULT_ROLE
from app.domain.user_profile import DEFAULT_EXPERIENCE, DEFAULT_LANGUAGE, Location, UserProfile
from config.logging import log_business_event
from utils.errors import ConflictError, InfrastructureError, InternalError, UserNotFound

if TYPE_CHECKING:
    from app.bootstrap.container import Collections
    from app.protocols.document_store import DocumentStoreProtocol
    from app.protocols.identity_provider import IdentityProviderProtocol
    from app.services.notifications import NotificationDispatcher
    from app.services.side_effects import SideEffectRunner

logger = logging.getLogger(__name__)

_PHONE_SEPARATORS = re.compile(r"[\s\-]")


def to_e164(phone: str) -> str:
    """Strip separators and force the leading ``+`` the identity provider expects."""
    digits = _PHONE_SEPARATORS.sub("", phone)
    return digits if digits.startswith("+") else f"+{digits}"


def _registration_failed(exc: Exception) -> InternalError:
    logger.error(
        "registration_failed",
        extra={"error_type": type(exc).__name__, "error": str(exc)},
    )
    return InternalError("Unable to create user account", error="Registration failed")


class RegisterUserUseCase:
    """Creates the identity account and its profile document.

    The account lookup failing with ``UserNotFound`` is the normal path;
    an existing account is a conflict and nothing is created. The welcome
    email is scheduled and never affects the response. When a step after
    account creation fails, the account and any profile written are removed
    so the same email can register again.
    """

    def __init__(
        self,
        identity: IdentityProviderProtocol,
        store: DocumentStoreProtocol,
        collections: Collections,
        notifier: NotificationDispatcher,
        side_effects: SideEffectRunner,
    ) -> None:
        self._identity = identity
        self._store = store
        self._collections = collections
        self._notifier = notifier
        self._side_effects = side_effects

    async def execute(self, payload: dict[str, Any]) -> dict[str, Any]:
        values = validate_or_raise(payload, REGISTRATION_RULES)
        email = values["email"]

        try:
            await self._ensure_email_available(email)
            account = await self._identity.create_user(
                email=email,
                password=values["password"],
                display_name=f"{values['firstName']} {values['lastName']}",
                phone_number=to_e164(values["phoneNumber"]),
            )
        except InfrastructureError as exc:
            raise _registration_failed(exc) from exc

        try:
            profile = UserProfile(
                uid=account.uid,
                email=email,
                first_name=values["firstName"],
                last_name=values["lastName"],
                phone_number=values["phoneNumber"],
                location=Location(
                    lat=values["location.lat"],
                    lng=values["location.lng"],
                    address=values["location.address"],
                ),
                language=values.get("language", DEFAULT_LANGUAGE),
                role=values.get("role", DEFAULT_ROLE),
                farm_size=values.get("farmSize", 0),
                crops=values.get("crops", []),
                experience=values.get("experience", DEFAULT_EXPERIENCE),
            )
            await self._store.set(self._collections.users, account.uid, profile.to_store_dict())
            token = await self._identity.create_custom_token(account.uid)
        except InfrastructureError as exc:
            await self._discard_account(account.uid)
            raise _registration_failed(exc) from exc
        except Exception:
            await self._discard_account(account.uid)
            raise

        self._side_effects.schedule(
            "welcome_email",
            self._notifier.send_welcome(email, profile.first_name, profile.language),
        )

        log_business_event(
            logger,
            "auth",
            "user_registered",
            user_id=account.uid,
            email=email,
            role=profile.role,
        )

        return {
            "message": "User registered successfully",
            "user": {
                "uid": account.uid,
                "email": email,
                "displayName": profile.display_name,
                "role": profile.role,
            },
            "token": token,
        }

    async def _ensure_email_available(self, email: str) -> None:
        try:
            await self._identity.get_user_by_email(email)
        except UserNotFound:
            return
        raise ConflictError(
            "An account with this email already exists",
            error="User already exists",
        )

    async def _discard_account(self, uid: str) -> None:
        try:
            await self._identity.delete_user(uid)
        except InfrastructureError as exc:
            logger.error(
                "registration_rollback_failed",
                extra={"uid": uid, "step": "identity", "error_type": type(exc).__name__},
            )
        try:
            await self._store.delete(self._collections.users, uid)
        except InfrastructureError as exc:
            logger.error(
                "registration_rollback_failed",
                extra={"uid": uid, "step": "profile", "error_type": type(exc).__name__},
            )
