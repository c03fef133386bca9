"""Speaker model"""
from sqlalchemy import Column, Integer, String, DateTime, Text, JSON
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from app.models.base import Base


class Speaker(Base):
    """Training presenters"""
    __tablename__ = "speakers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    photo_url = Column(String(1000), nullable=True)
    expertise = Column(String(500), nullable=True)
    years = Column(Integer, nullable=True)
    industries = Column(JSON, nullable=False, default=list)
    bio = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)

    # Relationships
    trainings = relationship("Training", back_populates="speaker")
