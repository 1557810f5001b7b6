"""Notification dispatcher.

Renders an email template and submits it through the transport. Bulk sends
fan out every recipient concurrently and settle all of them: one failed
delivery never cancels or blocks the others.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from app.protocols.email_transport import EmailMessage
from app.services.email_templates import render_email

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from app.protocols.email_transport import EmailTransportProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeliveryOutcome:
    """Per-recipient result of a bulk send."""

    recipient: str
    delivered: bool
    message_id: str | None = None
    error_type: str | None = None


class NotificationDispatcher:
    """Template selection, merge and submission.

    Args:
        transport: Email transport
        frontend_url: Base URL used for links inside templates
    """

    def __init__(self, transport: EmailTransportProtocol, *, frontend_url: str = "") -> None:
        self._transport = transport
        self._frontend_url = frontend_url.rstrip("/")

    async def send(
        self,
        to: str,
        template_name: str,
        data: Mapping[str, Any],
        language: str = "en",
        *,
        subject: str | None = None,
    ) -> str:
        """Render ``template_name`` and submit it to ``to``.

        Returns:
            Transport message id.

        Raises:
            EmailDeliveryError: Transport failure.
        """
        rendered = render_email(
            template_name,
            {"frontend_url": self._frontend_url, **data},
            language,
            subject=subject,
        )
        return await self._transport.send(
            EmailMessage(to=to, subject=rendered.subject, html=rendered.html)
        )

    async def send_welcome(self, email: str, first_name: str, language: str = "en") -> str:
        return await self.send(email, "welcome", {"first_name": first_name}, language)

    async def send_password_reset(self, email: str, reset_link: str, language: str = "en") -> str:
        return await self.send(email, "password_reset", {"reset_link": reset_link}, language)

    async def send_weather_alert(
        self, email: str, alert: Mapping[str, Any], language: str = "en"
    ) -> str:
        return await self.send(email, "weather_alert", alert, language)

    async def send_market_update(
        self, email: str, market: Mapping[str, Any], language: str = "en"
    ) -> str:
        return await self.send(email, "market_update", market, language)

    async def send_custom(self, to: str, subject: str, content: str, language: str = "en") -> str:
        return await self.send(to, "custom", {"content": content}, language, subject=subject)

    async def send_bulk(
        self,
        recipients: Iterable[str],
        subject: str,
        content: str,
        language: str = "en",
    ) -> list[DeliveryOutcome]:
        """Send the custom template to every recipient concurrently.

        All sends are attempted; the outcome list keeps the recipient order.
        """
        targets = list(recipients)
        results = await asyncio.gather(
            *(self.send_custom(to, subject, content, language) for to in targets),
            return_exceptions=True,
        )

        outcomes: list[DeliveryOutcome] = []
        for to, result in zip(targets, results, strict=True):
            if isinstance(result, Exception):
                outcomes.append(
                    DeliveryOutcome(recipient=to, delivered=False, error_type=type(result).__name__)
                )
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(DeliveryOutcome(recipient=to, delivered=True, message_id=result))

        failed = sum(1 for outcome in outcomes if not outcome.delivered)
        logger.info(
            "bulk_email_settled",
            extra={"recipients": len(targets), "delivered": len(targets) - failed, "failed": failed},
        )
        return outcomes
