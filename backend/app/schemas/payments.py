"""Pydantic schemas for training checkout and refunds"""
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class CheckoutRequest(BaseModel):
    training_id: int
    user_email: EmailStr
    user_name: str = Field(..., min_length=1)
    user_phone: Optional[str] = None
    user_company: Optional[str] = None
    success_url: str
    cancel_url: str

    @field_validator("success_url")
    @classmethod
    def check_success_url(cls, v):
        if "{CHECKOUT_SESSION_ID}" not in v:
            raise ValueError("success_url must contain the {CHECKOUT_SESSION_ID} placeholder")
        return v


class RefundRequest(BaseModel):
    # Major currency units; omit for a full refund
    amount: Optional[float] = Field(None, gt=0)
