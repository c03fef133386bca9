"""EmailLog model"""
from sqlalchemy import Column, Integer, String, Text, DateTime
from datetime import datetime, timezone
from app.models.base import Base


class EmailLog(Base):
    """One row per send attempt made for a download"""
    __tablename__ = "email_logs"

    id = Column(Integer, primary_key=True, index=True)
    download_id = Column(String(50), nullable=True, index=True)
    to = Column(String(255), nullable=False, index=True)
    subject = Column(String(1000), nullable=False)
    provider = Column(String(30), nullable=False)
    status = Column(String(20), nullable=False)  # sent, failed
    message_id = Column(String(255), nullable=True)
    error = Column(Text, nullable=True)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True)
