"""Protocol for the managed identity provider."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class IdentityAccount:
    """Account record returned by the identity provider."""

    uid: str
    email: str | None = None
    display_name: str | None = None
    phone_number: str | None = None
    email_verified: bool = False


class IdentityProviderProtocol(Protocol):
    """Contract for token verification and account management.

    ``verify_id_token`` raises ``TokenExpired``, ``TokenRevoked`` or
    ``TokenInvalid``; lookups raise ``UserNotFound``; any transport failure is
    raised as ``IdentityProviderError``.
    """

    async def verify_id_token(self, token: str) -> dict[str, Any]:
        """Verify a bearer token and return its decoded payload."""
        ...

    async def get_user_by_email(self, email: str) -> IdentityAccount:
        """Look up an account by email."""
        ...

    async def create_user(
        self,
        *,
        email: str,
        password: str,
        display_name: str,
        phone_number: str,
    ) -> IdentityAccount:
        """Create an account (email not yet verified)."""
        ...

    async def create_custom_token(self, uid: str) -> str:
        """Mint a custom sign-in token for the account."""
        ...

    async def generate_password_reset_link(self, email: str) -> str:
        """Generate a password reset link for the account."""
        ...

    async def mark_email_verified(self, uid: str) -> None:
        """Flag the account email as verified."""
        ...

    async def delete_user(self, uid: str) -> None:
        """Remove an account; an account already gone is not an error."""
        ...
