"""Claims - verified identity attributes for one request.

Produced by the credential verifier from a decoded identity token; never
persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

Role = Literal["farmer", "agronomist", "admin"]

ROLES: tuple[Role, ...] = ("farmer", "agronomist", "admin")
DEFAULT_ROLE: Role = "farmer"


@dataclass(frozen=True, slots=True)
class Claims:
    """Identity of the caller.

    Attributes:
        uid: Subject id (matches the user profile document id)
        email: Account email
        phone_number: E.164 phone number
        display_name: Display name
        photo_url: Avatar reference
        email_verified: Whether the email was verified
        role: Custom role claim (defaults to farmer)
        farm_id: Custom farm claim, when the account is bound to a farm
    """

    uid: str
    email: str | None = None
    phone_number: str | None = None
    display_name: str | None = None
    photo_url: str | None = None
    email_verified: bool = False
    role: str = DEFAULT_ROLE
    farm_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @classmethod
    def from_decoded_token(cls, decoded: dict[str, Any]) -> Claims:
        """Build claims from a decoded identity token payload."""
        return cls(
            uid=decoded["uid"],
            email=decoded.get("email"),
            phone_number=decoded.get("phone_number"),
            display_name=decoded.get("name"),
            photo_url=decoded.get("picture"),
            email_verified=bool(decoded.get("email_verified", False)),
            role=decoded.get("role") or DEFAULT_ROLE,
            farm_id=decoded.get("farm_id"),
        )
