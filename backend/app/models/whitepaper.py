"""Whitepaper model"""
from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, JSON
from datetime import datetime, timezone
from app.models.base import Base


class Whitepaper(Base):
    """Gated whitepapers, downloaded through the lead capture form"""
    __tablename__ = "whitepapers"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(500), nullable=False)
    slug = Column(String(500), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    summary = Column(Text, nullable=True)
    author = Column(String(255), nullable=True)
    author_title = Column(String(255), nullable=True)
    category = Column(String(100), nullable=True, index=True)
    industries = Column(JSON, nullable=False, default=list)
    highlights = Column(JSON, nullable=False, default=list)
    cover_image = Column(String(1000), nullable=True)
    pdf_url = Column(String(1000), nullable=False)
    file_size = Column(String(50), nullable=True)
    page_count = Column(Integer, nullable=True)
    status = Column(String(20), default="draft", nullable=False, index=True)  # draft, published, scheduled
    scheduled_date = Column(DateTime(timezone=True), nullable=True)
    publish_date = Column(DateTime(timezone=True), nullable=True)
    featured = Column(Boolean, default=False, nullable=False)
    views = Column(Integer, default=0, nullable=False)
    downloads = Column(Integer, default=0, nullable=False)
    seo = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)
