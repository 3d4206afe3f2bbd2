"""
Payment Pydantic schemas.

Request bodies use the camelCase field names clients send; responses use the
stored field names.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from backend.app.models.parcel_enums import PaymentRecordStatus


class PaymentIntentCreate(BaseModel):
    """Schema for POST /create-payment-intent."""
    amount_in_cents: int = Field(..., alias="amountInCents", description="Amount in the smallest currency unit")

    class Config:
        populate_by_name = True


class PaymentIntentResponse(BaseModel):
    client_secret: str = Field(..., serialization_alias="clientSecret")


class PaymentCreate(BaseModel):
    """
    Schema for POST /payments.

    parcel_id stays a plain string here; its syntax is checked by the
    Payment Recorder so that a bad identifier maps to "Invalid parcel ID".
    """
    parcel_id: str = Field(..., alias="parcelId")
    email: str = Field(..., min_length=3, max_length=255, description="Payer email")
    amount: float = Field(..., gt=0, description="Amount paid")
    payment_method: str = Field(..., alias="paymentMethod", min_length=1, max_length=50)
    transaction_id: str = Field(..., alias="transactionId", min_length=1, max_length=255)

    class Config:
        populate_by_name = True


class PaymentRecordedResponse(BaseModel):
    inserted_id: str = Field(..., serialization_alias="insertedId")
    message: str


class PaymentResponse(BaseModel):
    """Schema for payment history entries."""
    id: str
    parcel_id: str
    email: str
    amount: float
    payment_method: str
    transaction_id: str
    status: PaymentRecordStatus
    paid_at: datetime

    class Config:
        from_attributes = True
