"""Pydantic schemas for authentication"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    # Plain str so a missing value reaches the handler and gets the
    # "Email and password are required" message instead of a 422
    email: Optional[str] = None
    password: Optional[str] = None


class SetupRequest(BaseModel):
    """One-time creation of the first admin account"""
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1)


class SessionPayload(BaseModel):
    """Claims carried by a verified session token"""
    user_id: str
    email: str
    role: Literal["admin", "editor"]
    issued_at: datetime
    expires_at: datetime
