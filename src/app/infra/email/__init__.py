"""Email transport adapters."""

from app.infra.email.smtp_transport import SmtpEmailTransport

__all__ = ["SmtpEmailTransport"]
