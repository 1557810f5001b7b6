"""Email transport double."""

from __future__ import annotations

from app.protocols.email_transport import EmailMessage
from utils.errors import EmailDeliveryError


class FakeEmailTransport:
    """Records sent messages; refuses recipients listed in ``fail_for``."""

    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.sent: list[EmailMessage] = []
        self.attempted: list[str] = []
        self._fail_for = fail_for or set()

    async def send(self, message: EmailMessage) -> str:
        self.attempted.append(message.to)
        if message.to in self._fail_for:
            raise EmailDeliveryError(f"recipient refused: {message.to}")
        self.sent.append(message)
        return f"msg-{len(self.sent)}"
