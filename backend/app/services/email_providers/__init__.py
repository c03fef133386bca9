"""Email provider backends, selected by the configured provider name"""
from app.services.email_providers.base import EmailMessage, EmailProvider, SendResult, ProviderNotImplementedError
from app.services.email_providers.registry import EMAIL_PROVIDERS, get_provider

__all__ = [
    "EmailMessage", "EmailProvider", "SendResult", "ProviderNotImplementedError",
    "EMAIL_PROVIDERS", "get_provider"
]
