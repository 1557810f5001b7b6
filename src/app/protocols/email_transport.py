"""Protocol for the outbound email transport."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True, slots=True)
class EmailMessage:
    """Rendered email ready to be submitted."""

    to: str
    subject: str
    html: str
    attachments: tuple[tuple[str, bytes, str], ...] = field(default_factory=tuple)


class EmailTransportProtocol(Protocol):
    """Contract for submitting one message."""

    async def send(self, message: EmailMessage) -> str:
        """Submit the message and return the transport message id.

        Raises:
            EmailDeliveryError: If the transport refuses the message.
        """
        ...
