"""Email service - provider dispatch, whitepaper delivery emails and send logs"""
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.metrics import emails_sent_counter
from app.db.helpers import to_dict
from app.models.email_log import EmailLog
from app.services.config_service import get_email_config
from app.services.email_providers import EmailMessage, SendResult, get_provider
from app.utils.templates import process_template

logger = logging.getLogger(__name__)
email_logger = logging.getLogger("email")

TEST_EMAIL_SUBJECT = "Test Email from Content Admin"


def send_email(message: EmailMessage, db: Session, config: Optional[Dict[str, Any]] = None) -> SendResult:
    """Send a message through the configured provider

    Never raises: missing configuration, disabled auto-send, unknown
    providers and provider exceptions all come back as a failed SendResult.
    In test mode the recipient is replaced with the configured test address.
    """
    if config is None:
        config = get_email_config(db)
    if not config:
        return SendResult(success=False, error="Email not configured")

    if not config.get("enable_auto_send"):
        return SendResult(success=False, error="Auto-send is disabled")

    provider_name = config.get("provider")
    provider = get_provider(provider_name)
    if provider is None:
        return SendResult(success=False, error="Invalid email provider", provider=provider_name)

    if config.get("test_mode") and config.get("test_email"):
        email_logger.info(f"Test mode: redirecting email for {message.to} to {config['test_email']}")
        message = replace(message, to=config["test_email"])

    try:
        result = provider.send(config, message)
    except Exception as e:
        logger.error(f"{provider_name} send to {message.to} failed: {e}", exc_info=True)
        result = SendResult(success=False, error=str(e))

    result.provider = provider_name
    emails_sent_counter.labels(provider=provider_name, status="sent" if result.success else "failed").inc()
    if result.success:
        email_logger.info(f"Email sent to {message.to} via {provider_name} (id: {result.message_id})")
    else:
        email_logger.warning(f"Email to {message.to} via {provider_name} failed: {result.error}")
    return result


def send_whitepaper_email(download_id: int, whitepaper_title: str, pdf_url: str,
                          user_email: str, user_name: str, db: Session) -> SendResult:
    """Render the whitepaper template, send it and record an EmailLog row

    The log row is written whatever the send outcome.
    """
    config = get_email_config(db)
    template = ((config or {}).get("templates") or {}).get("whitepaper")
    if not config or not template:
        return SendResult(success=False, error="Email template not configured")

    variables = {
        "userName": user_name,
        "whitepaperTitle": whitepaper_title,
        "downloadLink": pdf_url,
        "companyName": config.get("from_name") or "",
        "year": str(datetime.now(timezone.utc).year),
    }
    subject = process_template(template.get("subject", ""), variables)
    message = EmailMessage(
        to=user_email,
        to_name=user_name,
        subject=subject,
        html_body=process_template(template.get("html_body", ""), variables),
        text_body=process_template(template.get("text_body", ""), variables),
    )

    result = send_email(message, db, config=config)

    # The send outcome stands even if the log row cannot be written
    try:
        db.add(EmailLog(
            download_id=str(download_id),
            to=user_email,
            subject=subject,
            provider=config.get("provider") or "",
            status="sent" if result.success else "failed",
            message_id=result.message_id,
            error=result.error,
            sent_at=datetime.now(timezone.utc) if result.success else None,
        ))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to write email log for download {download_id}: {e}")
    return result


def send_test_email(to: str, db: Session) -> SendResult:
    """Send a fixed message to check the saved configuration"""
    config = get_email_config(db)
    provider_name = (config or {}).get("provider", "")
    message = EmailMessage(
        to=to,
        to_name="",
        subject=TEST_EMAIL_SUBJECT,
        html_body=(
            "<h1>Email configuration test</h1>"
            f"<p>This test message was sent with the <strong>{provider_name}</strong> provider.</p>"
            "<p>If you received it, your email settings are working.</p>"
        ),
        text_body=(
            "Email configuration test\n\n"
            f"This test message was sent with the {provider_name} provider.\n"
            "If you received it, your email settings are working."
        ),
    )
    return send_email(message, db, config=config)


def get_email_logs(db: Session, limit: int = 50) -> List[Dict[str, Any]]:
    """Most recent send attempts, newest first"""
    logs = db.query(EmailLog).order_by(EmailLog.created_at.desc(), EmailLog.id.desc()).limit(limit).all()
    return [to_dict(log) for log in logs]
