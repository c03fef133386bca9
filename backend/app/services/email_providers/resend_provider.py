"""Resend backend (resend SDK)"""
import logging
from typing import Any, Dict

import resend

from app.services.email_providers.base import EmailMessage, EmailProvider, SendResult

logger = logging.getLogger(__name__)


class ResendProvider(EmailProvider):
    name = "resend"

    def send(self, config: Dict[str, Any], message: EmailMessage) -> SendResult:
        if not config.get("api_key"):
            return SendResult(success=False, error="Resend API key is not configured")

        resend.api_key = config["api_key"]

        params = {
            "from": self.sender(config),
            "to": message.to,
            "subject": message.subject,
            "html": message.html_body,
            "text": message.text_body,
        }
        reply_to = self.reply_to(config, message)
        if reply_to:
            params["reply_to"] = reply_to

        response = resend.Emails.send(params)

        # Resend returns a dict with 'id' on success, handle object responses too
        email_id = None
        if isinstance(response, dict):
            email_id = response.get("id")
        elif hasattr(response, "id"):
            email_id = response.id

        if not email_id:
            logger.error(f"Resend returned invalid response: {response}")
            return SendResult(success=False, error="Resend did not return a message id")

        return SendResult(success=True, message_id=email_id)
