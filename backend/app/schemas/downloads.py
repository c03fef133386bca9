"""Pydantic schemas for lead capture and download management"""
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

ResourceType = Literal["whitepaper", "case-study", "newsletter", "brochure", "datasheet", "guide"]
EmailStatus = Literal["pending", "delivered", "failed", "bounced"]
FollowUpStatus = Literal["pending", "contacted", "converted", "not-interested"]


class LeadContact(BaseModel):
    """Contact details submitted with a gated download form"""
    email: EmailStr
    name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    form_data: Optional[Dict[str, Any]] = None


class DownloadCreate(BaseModel):
    """Generic lead capture for any resource type (no email is sent)"""
    resource_type: ResourceType
    resource_id: str = Field(..., min_length=1)
    resource_title: str = Field(..., min_length=1)
    resource_url: str = Field(..., min_length=1)
    user_email: EmailStr
    user_name: str = Field(..., min_length=1)
    user_phone: Optional[str] = None
    user_company: Optional[str] = None
    user_job_title: Optional[str] = None
    form_data: Optional[Dict[str, Any]] = None


class FollowUpUpdate(BaseModel):
    follow_up_status: FollowUpStatus
    follow_up_notes: Optional[str] = None
    assigned_to: Optional[str] = None
