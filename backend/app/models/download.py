"""Download (lead capture) model"""
from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, JSON
from datetime import datetime, timezone
from app.models.base import Base


class Download(Base):
    """One gated resource download, doubling as a sales lead"""
    __tablename__ = "downloads"

    id = Column(Integer, primary_key=True, index=True)

    # Resource
    resource_type = Column(String(30), nullable=False, index=True)  # whitepaper, case-study, newsletter, brochure, datasheet, guide
    resource_id = Column(String(50), nullable=False, index=True)
    resource_title = Column(String(500), nullable=False)
    resource_url = Column(String(1000), nullable=False)

    # Lead
    user_email = Column(String(255), nullable=False, index=True)
    user_name = Column(String(255), nullable=False)
    user_phone = Column(String(50), nullable=True)
    user_company = Column(String(255), nullable=True)
    user_job_title = Column(String(255), nullable=True)
    form_data = Column(JSON, nullable=True)

    # Email delivery
    email_sent = Column(Boolean, default=False, nullable=False)
    email_sent_at = Column(DateTime(timezone=True), nullable=True)
    email_status = Column(String(20), default="pending", nullable=False, index=True)  # pending, delivered, failed, bounced
    email_provider = Column(String(30), nullable=True)
    email_id = Column(String(255), nullable=True)
    email_error = Column(Text, nullable=True)

    # Request metadata
    downloaded_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True)
    ip_address = Column(String(100), nullable=True)
    user_agent = Column(String(1000), nullable=True)
    referrer = Column(String(1000), nullable=True)

    # Sales follow-up
    follow_up_required = Column(Boolean, default=False, nullable=False)
    follow_up_status = Column(String(20), default="pending", nullable=False)  # pending, contacted, converted, not-interested
    follow_up_notes = Column(Text, nullable=True)
    assigned_to = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)
