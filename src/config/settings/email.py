"""Email settings.

SMTP transport used by the notification dispatcher.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from email.utils import formataddr
from functools import lru_cache


@dataclass(frozen=True)
class EmailSettings:
    """SMTP settings.

    Attributes:
        smtp_host: SMTP server host
        smtp_port: SMTP server port
        smtp_username: SMTP user
        smtp_password: SMTP password
        smtp_use_tls: Upgrade the connection with STARTTLS
        from_address: Sender address
        from_name: Sender display name
        timeout_seconds: Socket timeout for the SMTP session
    """

    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    from_address: str = ""
    from_name: str = "SmartAgriNet"
    timeout_seconds: float = 30.0

    @property
    def sender(self) -> str:
        """Formatted From header."""
        return formataddr((self.from_name, self.from_address))

    def validate(self) -> list[str]:
        """Validate minimal email settings."""
        errors: list[str] = []
        if not self.smtp_host:
            errors.append("EMAIL_SMTP_HOST not configured")
        if not self.from_address:
            errors.append("EMAIL_FROM_ADDRESS not configured")
        if self.smtp_username and not self.smtp_password:
            errors.append("EMAIL_PASSWORD required when EMAIL_USER is set")
        if self.timeout_seconds <= 0:
            errors.append("EMAIL_TIMEOUT_SECONDS must be > 0")
        return errors


def _load_email_from_env() -> EmailSettings:
    """Load EmailSettings from environment variables."""
    username = os.getenv("EMAIL_USER", "")
    return EmailSettings(
        smtp_host=os.getenv("EMAIL_SMTP_HOST", "smtp.gmail.com"),
        smtp_port=int(os.getenv("EMAIL_SMTP_PORT", "587")),
        smtp_username=username,
        smtp_password=os.getenv("EMAIL_PASSWORD", ""),
        smtp_use_tls=os.getenv("EMAIL_SMTP_USE_TLS", "true").lower() in ("true", "1"),
        from_address=os.getenv("EMAIL_FROM_ADDRESS", username),
        from_name=os.getenv("EMAIL_FROM_NAME", "SmartAgriNet"),
        timeout_seconds=float(os.getenv("EMAIL_TIMEOUT_SECONDS", "30")),
    )


@lru_cache(maxsize=1)
def get_email_settings() -> EmailSettings:
    """Return the cached EmailSettings instance."""
    return _load_email_from_env()
