"""Firebase Authentication adapter.

Wraps the blocking ``firebase_admin.auth`` calls with ``asyncio.to_thread``
and a timeout, and maps SDK exceptions onto the application taxonomy.
Expired and revoked tokens are distinguished from malformed ones because
each asks the client for a different action.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from firebase_admin import auth
from firebase_admin.exceptions import FirebaseError

from app.protocols.identity_provider import IdentityAccount, IdentityProviderProtocol
from utils.errors import (
    IdentityProviderError,
    TokenExpired,
    TokenInvalid,
    TokenRevoked,
    UserNotFound,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from firebase_admin import App

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _to_account(record: Any) -> IdentityAccount:
    return IdentityAccount(
        uid=record.uid,
        email=record.email,
        display_name=record.display_name,
        phone_number=record.phone_number,
        email_verified=bool(record.email_verified),
    )


class FirebaseIdentityProvider(IdentityProviderProtocol):
    """Identity provider backed by Firebase Authentication.

    Args:
        firebase_app: Initialized firebase_admin App
        timeout_seconds: Upper bound for each SDK call
        check_revoked: Ask Firebase whether the token was revoked
    """

    def __init__(
        self,
        firebase_app: App,
        *,
        timeout_seconds: float = 10.0,
        check_revoked: bool = True,
    ) -> None:
        self._app = firebase_app
        self._timeout = timeout_seconds
        self._check_revoked = check_revoked

    async def _call(self, operation: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args, app=self._app, **kwargs),
                timeout=self._timeout,
            )
        except TimeoutError as exc:
            logger.error("identity_call_timeout", extra={"operation": operation})
            raise IdentityProviderError(f"{operation} timed out") from exc

    async def verify_id_token(self, token: str) -> dict[str, Any]:
        try:
            return await self._call(
                "verify_id_token",
                auth.verify_id_token,
                token,
                check_revoked=self._check_revoked,
            )
        # Expired/Revoked subclass InvalidIdTokenError: order matters
        except auth.ExpiredIdTokenError as exc:
            raise TokenExpired() from exc
        except auth.RevokedIdTokenError as exc:
            raise TokenRevoked() from exc
        except (auth.InvalidIdTokenError, auth.UserDisabledError, ValueError) as exc:
            raise TokenInvalid() from exc
        except auth.CertificateFetchError as exc:
            logger.error("identity_certificate_fetch_failed", extra={"error_type": type(exc).__name__})
            raise IdentityProviderError("unable to fetch verification certificates") from exc
        except FirebaseError as exc:
            raise IdentityProviderError("verify_id_token failed") from exc

    async def get_user_by_email(self, email: str) -> IdentityAccount:
        try:
            record = await self._call("get_user_by_email", auth.get_user_by_email, email)
        except auth.UserNotFoundError as exc:
            raise UserNotFound(email) from exc
        except FirebaseError as exc:
            raise IdentityProviderError("get_user_by_email failed") from exc
        return _to_account(record)

    async def create_user(
        self,
        *,
        email: str,
        password: str,
        display_name: str,
        phone_number: str,
    ) -> IdentityAccount:
        try:
            record = await self._call(
                "create_user",
                auth.create_user,
                email=email,
                password=password,
                display_name=display_name,
                phone_number=phone_number,
                email_verified=False,
            )
        except (FirebaseError, ValueError) as exc:
            raise IdentityProviderError("create_user failed") from exc
        return _to_account(record)

    async def create_custom_token(self, uid: str) -> str:
        try:
            token = await self._call("create_custom_token", auth.create_custom_token, uid)
        except (FirebaseError, ValueError) as exc:
            raise IdentityProviderError("create_custom_token failed") from exc
        return token.decode("utf-8") if isinstance(token, bytes) else str(token)

    async def generate_password_reset_link(self, email: str) -> str:
        try:
            return await self._call(
                "generate_password_reset_link",
                auth.generate_password_reset_link,
                email,
            )
        except auth.UserNotFoundError as exc:
            raise UserNotFound(email) from exc
        except (FirebaseError, ValueError) as exc:
            raise IdentityProviderError("generate_password_reset_link failed") from exc

    async def mark_email_verified(self, uid: str) -> None:
        try:
            await self._call("update_user", auth.update_user, uid, email_verified=True)
        except auth.UserNotFoundError as exc:
            raise UserNotFound(uid) from exc
        except (FirebaseError, ValueError) as exc:
            raise IdentityProviderError("update_user failed") from exc

    async def delete_user(self, uid: str) -> None:
        try:
            await self._call("delete_user", auth.delete_user, uid)
        except auth.UserNotFoundError:
            logger.info("identity_user_already_deleted", extra={"uid": uid})
        except (FirebaseError, ValueError) as exc:
            raise IdentityProviderError("delete_user failed") from exc
