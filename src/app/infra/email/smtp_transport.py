"""SMTP email transport.

``smtplib`` is blocking, so each submission runs in a worker thread. A new
SMTP session is opened per message; bulk sends run these sessions
concurrently.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage as MimeMessage
from email.utils import make_msgid
from typing import TYPE_CHECKING

from app.protocols.email_transport import EmailMessage, EmailTransportProtocol
from utils.errors import EmailDeliveryError

if TYPE_CHECKING:
    from config.settings import EmailSettings

logger = logging.getLogger(__name__)


class SmtpEmailTransport(EmailTransportProtocol):
    """Transport submitting messages to an SMTP relay.

    Args:
        settings: SMTP settings
    """

    def __init__(self, settings: EmailSettings) -> None:
        self._settings = settings

    def _build(self, message: EmailMessage) -> MimeMessage:
        mime = MimeMessage()
        mime["From"] = self._settings.sender
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime["Message-ID"] = make_msgid(domain=self._settings.from_address.rpartition("@")[2] or None)
        mime.set_content("This message requires an HTML capable email client.")
        mime.add_alternative(message.html, subtype="html")
        for filename, content, mime_type in message.attachments:
            maintype, _, subtype = mime_type.partition("/")
            mime.add_attachment(
                content,
                maintype=maintype,
                subtype=subtype or "octet-stream",
                filename=filename,
            )
        return mime

    def _send_sync(self, mime: MimeMessage) -> None:
        settings = self._settings
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=settings.timeout_seconds) as smtp:
            if settings.smtp_use_tls:
                smtp.starttls()
            if settings.smtp_username:
                smtp.login(settings.smtp_username, settings.smtp_password)
            smtp.send_message(mime)

    async def send(self, message: EmailMessage) -> str:
        mime = self._build(message)
        try:
            await asyncio.to_thread(self._send_sync, mime)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(
                "email_send_failed",
                extra={"subject": message.subject, "error_type": type(exc).__name__},
            )
            raise EmailDeliveryError(str(exc)) from exc

        message_id = str(mime["Message-ID"])
        logger.info(
            "email_sent",
            extra={"subject": message.subject, "message_id": message_id},
        )
        return message_id
