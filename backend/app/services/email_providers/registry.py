"""Email provider registry"""
from typing import Optional

from app.services.email_providers.base import EmailProvider
from app.services.email_providers.resend_provider import ResendProvider
from app.services.email_providers.sendgrid import SendGridProvider
from app.services.email_providers.smtp import SMTPProvider
from app.services.email_providers.unsupported import AWSSESProvider, MailgunProvider

EMAIL_PROVIDERS = {
    "resend": ResendProvider(),
    "sendgrid": SendGridProvider(),
    "mailgun": MailgunProvider(),
    "aws-ses": AWSSESProvider(),
    "smtp": SMTPProvider(),
}


def get_provider(name: Optional[str]) -> Optional[EmailProvider]:
    """Look up the backend for a provider name, None if unknown"""
    return EMAIL_PROVIDERS.get(name or "")
