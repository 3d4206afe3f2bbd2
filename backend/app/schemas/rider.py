"""
Rider Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from backend.app.models.enums import RiderStatus


class RiderApply(BaseModel):
    """Schema for a rider application. Email comes from the token."""
    name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    region: Optional[str] = Field(None, max_length=100)
    district: Optional[str] = Field(None, max_length=100)


class RiderStatusUpdate(BaseModel):
    status: RiderStatus


class RiderResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str]
    region: Optional[str]
    district: Optional[str]
    status: RiderStatus
    created_at: datetime

    class Config:
        from_attributes = True
