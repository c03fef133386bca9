"""Plain SMTP backend (smtplib)"""
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, formatdate, make_msgid
from typing import Any, Dict

from app.services.email_providers.base import EmailMessage, EmailProvider, SendResult

logger = logging.getLogger(__name__)


class SMTPProvider(EmailProvider):
    name = "smtp"

    def send(self, config: Dict[str, Any], message: EmailMessage) -> SendResult:
        host = config.get("smtp_host")
        if not host:
            return SendResult(success=False, error="SMTP host is not configured")
        port = int(config.get("smtp_port") or (465 if config.get("smtp_secure") else 587))

        mime = MIMEMultipart("alternative")
        mime["Subject"] = message.subject
        mime["From"] = formataddr((config.get("from_name") or "", config.get("from_email") or ""))
        mime["To"] = formataddr((message.to_name or "", message.to))
        mime["Date"] = formatdate(localtime=True)
        message_id = make_msgid()
        mime["Message-ID"] = message_id
        reply_to = self.reply_to(config, message)
        if reply_to:
            mime["Reply-To"] = reply_to
        mime.attach(MIMEText(message.text_body or "", "plain", "utf-8"))
        mime.attach(MIMEText(message.html_body or "", "html", "utf-8"))

        context = ssl.create_default_context()
        # smtp_secure means implicit TLS (port 465), otherwise STARTTLS when offered
        if config.get("smtp_secure"):
            server = smtplib.SMTP_SSL(host, port, context=context, timeout=30)
        else:
            server = smtplib.SMTP(host, port, timeout=30)

        with server:
            if not config.get("smtp_secure"):
                server.ehlo()
                if server.has_extn("starttls"):
                    server.starttls(context=context)
                    server.ehlo()
            if config.get("smtp_user"):
                server.login(config["smtp_user"], config.get("smtp_password") or "")
            server.sendmail(config.get("from_email"), [message.to], mime.as_string())

        logger.info(f"SMTP message {message_id} handed to {host}:{port}")
        return SendResult(success=True, message_id=message_id)
