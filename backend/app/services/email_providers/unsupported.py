"""Providers that can be selected but have no backend yet"""
from typing import Any, Dict

from app.services.email_providers.base import EmailMessage, EmailProvider, ProviderNotImplementedError, SendResult


class MailgunProvider(EmailProvider):
    name = "mailgun"

    def send(self, config: Dict[str, Any], message: EmailMessage) -> SendResult:
        raise ProviderNotImplementedError("Mailgun integration not implemented yet")


class AWSSESProvider(EmailProvider):
    name = "aws-ses"

    def send(self, config: Dict[str, Any], message: EmailMessage) -> SendResult:
        raise ProviderNotImplementedError("AWS SES integration not implemented yet")
