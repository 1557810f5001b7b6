"""Credential verifier - bearer token to Claims.

One code path serves both modes: ``optional=False`` raises the
authentication failure, ``optional=True`` logs it and lets the request
continue unauthenticated. In optional mode a bad token is still reported as
a security event so it is distinguishable from an absent one.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.claims import Claims
from config.logging import log_security_event
from utils.errors import (
    AuthenticationFailure,
    IdentityProviderError,
    MissingToken,
    TokenInvalid,
)

if TYPE_CHECKING:
    from app.protocols.identity_provider import IdentityProviderProtocol

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token of an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_SCHEME or not token:
        return None
    return token


class CredentialVerifier:
    """Verify bearer tokens against the identity provider.

    Args:
        identity: Identity provider adapter
    """

    def __init__(self, identity: IdentityProviderProtocol) -> None:
        self._identity = identity

    async def verify(self, authorization: str | None, *, optional: bool = False) -> Claims | None:
        """Verify the Authorization header.

        Args:
            authorization: Raw ``Authorization`` header value.
            optional: Soft-fail mode: return None instead of raising.

        Returns:
            Claims, or None in optional mode when unauthenticated.

        Raises:
            MissingToken: No bearer token (hard mode, no external call made).
            TokenExpired / TokenRevoked / TokenInvalid: Verification refused.
            IdentityProviderError: Identity provider unreachable (hard mode).
        """
        token = extract_bearer_token(authorization)
        try:
            if token is None:
                raise MissingToken()
            decoded = await self._identity.verify_id_token(token)
            if not decoded.get("uid"):
                raise TokenInvalid()
            claims = Claims.from_decoded_token(decoded)
        except AuthenticationFailure as exc:
            if optional:
                if not isinstance(exc, MissingToken):
                    log_security_event(logger, "optional_auth_rejected", reason=exc.reason)
                return None
            log_security_event(logger, "authentication_failed", reason=exc.reason)
            raise
        except IdentityProviderError:
            if optional:
                logger.warning("optional_auth_provider_unavailable")
                return None
            raise

        logger.info("user_authenticated", extra={"uid": claims.uid, "role": claims.role})
        return claims
