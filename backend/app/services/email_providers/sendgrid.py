"""SendGrid backend (v3 mail/send REST API over httpx)"""
import logging
from typing import Any, Dict

import httpx

from app.services.email_providers.base import EmailMessage, EmailProvider, SendResult

logger = logging.getLogger(__name__)

SENDGRID_SEND_URL = "https://api.sendgrid.com/v3/mail/send"


class SendGridProvider(EmailProvider):
    name = "sendgrid"

    def send(self, config: Dict[str, Any], message: EmailMessage) -> SendResult:
        if not config.get("api_key"):
            return SendResult(success=False, error="SendGrid API key is not configured")

        payload = {
            "personalizations": [{"to": [{"email": message.to, "name": message.to_name}]}],
            "from": {"email": config.get("from_email"), "name": config.get("from_name")},
            "subject": message.subject,
            "content": [
                {"type": "text/plain", "value": message.text_body or " "},
                {"type": "text/html", "value": message.html_body or " "},
            ],
        }
        reply_to = self.reply_to(config, message)
        if reply_to:
            payload["reply_to"] = {"email": reply_to}

        with httpx.Client(timeout=30.0) as client:
            response = client.post(
                SENDGRID_SEND_URL,
                json=payload,
                headers={"Authorization": f"Bearer {config['api_key']}"},
            )

        if response.status_code >= 400:
            # SendGrid error body: {"errors": [{"message": ...}]}
            try:
                errors = response.json().get("errors") or []
                detail = "; ".join(e.get("message", "") for e in errors) or response.text
            except ValueError:
                detail = response.text
            logger.error(f"SendGrid rejected message to {message.to}: {response.status_code} {detail}")
            return SendResult(success=False, error=f"SendGrid error {response.status_code}: {detail}")

        return SendResult(success=True, message_id=response.headers.get("x-message-id"))
