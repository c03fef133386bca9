"""Pydantic schemas for email and Stripe configuration"""
from typing import Dict, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

EmailProviderName = Literal["resend", "sendgrid", "mailgun", "aws-ses", "smtp"]


class EmailTemplate(BaseModel):
    subject: str = ""
    html_body: str = ""
    text_body: str = ""
    attach_pdf: bool = False


class EmailConfigUpdate(BaseModel):
    """Partial update of the email configuration

    Secrets sent back as the masked placeholder keep their stored value.
    """
    provider: Optional[EmailProviderName] = None
    api_key: Optional[str] = None
    smtp_host: Optional[str] = None
    smtp_port: Optional[int] = Field(None, ge=1, le=65535)
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_secure: Optional[bool] = None
    from_email: Optional[EmailStr] = None
    from_name: Optional[str] = None
    reply_to: Optional[str] = None
    enable_auto_send: Optional[bool] = None
    enable_retry: Optional[bool] = None
    max_retries: Optional[int] = Field(None, ge=0)
    retry_delay: Optional[int] = Field(None, ge=0)
    test_mode: Optional[bool] = None
    test_email: Optional[str] = None
    templates: Optional[Dict[str, EmailTemplate]] = None


class SendTestEmailRequest(BaseModel):
    to: EmailStr


class StripeConfigUpdate(BaseModel):
    enabled: Optional[bool] = None
    publishable_key: Optional[str] = None
    secret_key: Optional[str] = None
    webhook_secret: Optional[str] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
