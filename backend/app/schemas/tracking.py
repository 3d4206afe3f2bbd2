"""
Tracking log Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class TrackingCreate(BaseModel):
    tracking_id: str = Field(..., min_length=1, max_length=64)
    parcel_id: Optional[str] = Field(None, description="Parcel the update belongs to")
    status: str = Field(..., min_length=1, max_length=50)
    message: Optional[str] = Field(None, max_length=500)


class TrackingResponse(BaseModel):
    id: str
    tracking_id: str
    parcel_id: Optional[str]
    status: str
    message: Optional[str]
    updated_by: Optional[str]
    timestamp: datetime

    class Config:
        from_attributes = True
