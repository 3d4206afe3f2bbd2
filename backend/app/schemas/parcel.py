"""
Parcel Pydantic schemas.

Defines request and response models for parcel management.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from backend.app.models.parcel_enums import PaymentStatus, DeliveryStatus


class ParcelCreate(BaseModel):
    """Schema for creating a new parcel. The owner comes from the token."""
    title: str = Field(..., min_length=1, max_length=200, description="Parcel title")
    parcel_type: str = Field(default="document", max_length=50, description="document or non-document")
    weight_kg: Optional[float] = Field(None, gt=0, description="Weight in kilograms")
    cost: float = Field(..., gt=0, description="Delivery cost")
    sender_name: Optional[str] = Field(None, max_length=100)
    sender_address: Optional[str] = Field(None, max_length=500)
    receiver_name: Optional[str] = Field(None, max_length=100)
    receiver_address: Optional[str] = Field(None, max_length=500)
    tracking_id: Optional[str] = Field(None, max_length=64, description="Public tracking id")


class ParcelResponse(BaseModel):
    """Schema for parcel response."""
    id: str
    created_by: str
    title: str
    parcel_type: str
    weight_kg: Optional[float]
    cost: float
    sender_name: Optional[str]
    sender_address: Optional[str]
    receiver_name: Optional[str]
    receiver_address: Optional[str]
    tracking_id: Optional[str]
    delivery_status: DeliveryStatus
    payment_status: PaymentStatus
    transaction_id: Optional[str]
    paid_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
