"""Blog post model"""
from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, JSON
from datetime import datetime, timezone
from app.models.base import Base


class Blog(Base):
    """Blog posts"""
    __tablename__ = "blogs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(500), nullable=False)
    slug = Column(String(500), unique=True, nullable=False, index=True)
    excerpt = Column(Text, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    author = Column(String(255), nullable=False)
    author_id = Column(String(50), nullable=False)
    cover_image = Column(String(1000), nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    status = Column(String(20), default="draft", nullable=False, index=True)  # draft, published, archived
    featured = Column(Boolean, default=False, nullable=False)
    published_at = Column(DateTime(timezone=True), nullable=True)
    views = Column(Integer, default=0, nullable=False)
    seo = Column(JSON, nullable=True)
    related_posts = Column(JSON, nullable=False, default=list)  # blog ids
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)
