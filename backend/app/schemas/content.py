"""Pydantic schemas for blogs, whitepapers, trainings and speakers

Update schemas have every field optional; only fields the client sends are
applied (model_dump(exclude_unset=True)).
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class SEOFields(BaseModel):
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: List[str] = []
    og_image: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    canonical_url: Optional[str] = None


# Blogs

class BlogCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    slug: Optional[str] = None  # derived from title when omitted
    excerpt: str = ""
    content: str = ""
    cover_image: Optional[str] = None
    tags: List[str] = []
    status: Literal["draft", "published", "archived"] = "draft"
    featured: bool = False
    seo: Optional[SEOFields] = None
    related_posts: List[int] = []


class BlogUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    slug: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    cover_image: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[Literal["draft", "published", "archived"]] = None
    featured: Optional[bool] = None
    seo: Optional[SEOFields] = None
    related_posts: Optional[List[int]] = None


# Whitepapers

class WhitepaperCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    slug: Optional[str] = None
    description: str = ""
    summary: Optional[str] = None
    author: Optional[str] = None
    author_title: Optional[str] = None
    category: Optional[str] = None
    industries: List[str] = []
    highlights: List[str] = []
    cover_image: Optional[str] = None
    pdf_url: str = Field(..., min_length=1)
    file_size: Optional[str] = None
    page_count: Optional[int] = Field(None, ge=0)
    status: Literal["draft", "published", "scheduled"] = "draft"
    scheduled_date: Optional[datetime] = None
    publish_date: Optional[datetime] = None
    featured: bool = False
    seo: Optional[SEOFields] = None


class WhitepaperUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    slug: Optional[str] = None
    description: Optional[str] = None
    summary: Optional[str] = None
    author: Optional[str] = None
    author_title: Optional[str] = None
    category: Optional[str] = None
    industries: Optional[List[str]] = None
    highlights: Optional[List[str]] = None
    cover_image: Optional[str] = None
    pdf_url: Optional[str] = Field(None, min_length=1)
    file_size: Optional[str] = None
    page_count: Optional[int] = Field(None, ge=0)
    status: Optional[Literal["draft", "published", "scheduled"]] = None
    scheduled_date: Optional[datetime] = None
    publish_date: Optional[datetime] = None
    featured: Optional[bool] = None
    seo: Optional[SEOFields] = None


# Trainings

TrainingType = Literal["live", "recorded", "on-demand"]
TrainingLevel = Literal["basic", "intermediate", "advanced", "basic/intermediate"]


class PricingOption(BaseModel):
    name: str
    price: float = Field(..., ge=0)


class TrainingCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    slug: Optional[str] = None
    type: TrainingType = "live"
    level: TrainingLevel = "basic"
    industry: str = ""
    sub_industry: Optional[str] = None
    description: str = ""
    overview: Optional[str] = None
    content: str = ""
    who_should_attend: Optional[str] = None
    date: Optional[datetime] = None
    duration: str = ""
    regular_price: float = Field(..., ge=0)
    discount_price: Optional[float] = Field(None, ge=0)
    pricing_options: List[PricingOption] = []
    speaker_id: int
    tags: List[str] = []
    cover_image: Optional[str] = None
    status: Literal["draft", "published", "archived"] = "draft"
    featured: bool = False
    related_trainings: List[int] = []
    seo: Optional[SEOFields] = None


class TrainingUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    slug: Optional[str] = None
    type: Optional[TrainingType] = None
    level: Optional[TrainingLevel] = None
    industry: Optional[str] = None
    sub_industry: Optional[str] = None
    description: Optional[str] = None
    overview: Optional[str] = None
    content: Optional[str] = None
    who_should_attend: Optional[str] = None
    date: Optional[datetime] = None
    duration: Optional[str] = None
    regular_price: Optional[float] = Field(None, ge=0)
    discount_price: Optional[float] = Field(None, ge=0)
    pricing_options: Optional[List[PricingOption]] = None
    speaker_id: Optional[int] = None
    tags: Optional[List[str]] = None
    cover_image: Optional[str] = None
    status: Optional[Literal["draft", "published", "archived"]] = None
    featured: Optional[bool] = None
    related_trainings: Optional[List[int]] = None
    seo: Optional[SEOFields] = None


# Speakers

class SpeakerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    photo_url: Optional[str] = None
    expertise: Optional[str] = None
    years: Optional[int] = Field(None, ge=0)
    industries: List[str] = []
    bio: Optional[str] = None


class SpeakerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    photo_url: Optional[str] = None
    expertise: Optional[str] = None
    years: Optional[int] = Field(None, ge=0)
    industries: Optional[List[str]] = None
    bio: Optional[str] = None
