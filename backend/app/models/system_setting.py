"""System setting model"""
from sqlalchemy import Column, Integer, String, DateTime, JSON
from datetime import datetime, timezone
from app.models.base import Base


class SystemSetting(Base):
    """Process-wide configuration documents keyed by name (email_config, stripe_config)"""
    __tablename__ = "system_settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), unique=True, nullable=False, index=True)
    value = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)
