"""Training model"""
from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, JSON, Float, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from app.models.base import Base


class Training(Base):
    """Live, recorded and on-demand trainings sold through checkout"""
    __tablename__ = "trainings"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(500), nullable=False)
    slug = Column(String(500), unique=True, nullable=False, index=True)
    type = Column(String(20), default="live", nullable=False)  # live, recorded, on-demand
    level = Column(String(30), default="basic", nullable=False)  # basic, intermediate, advanced, basic/intermediate
    industry = Column(String(255), nullable=False, default="")
    sub_industry = Column(String(255), nullable=True)
    description = Column(Text, nullable=False, default="")
    overview = Column(Text, nullable=True)
    content = Column(Text, nullable=False, default="")
    who_should_attend = Column(Text, nullable=True)
    date = Column(DateTime(timezone=True), nullable=True)
    duration = Column(String(50), nullable=False, default="")
    regular_price = Column(Float, nullable=False, default=0)
    discount_price = Column(Float, nullable=True)
    pricing_options = Column(JSON, nullable=False, default=list)
    speaker_id = Column(Integer, ForeignKey("speakers.id"), nullable=False, index=True)
    speaker_name = Column(String(255), nullable=False)  # copy of Speaker.name, kept in sync on rename
    tags = Column(JSON, nullable=False, default=list)
    cover_image = Column(String(1000), nullable=True)
    status = Column(String(20), default="draft", nullable=False, index=True)  # draft, published, archived
    featured = Column(Boolean, default=False, nullable=False)
    views = Column(Integer, default=0, nullable=False)
    related_trainings = Column(JSON, nullable=False, default=list)
    seo = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)

    # Relationships
    speaker = relationship("Speaker", back_populates="trainings")
