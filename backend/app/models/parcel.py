"""
Parcel database model.

Parcels are booked by users and paid for through the Payment Recorder.
"""

from sqlalchemy import Column, String, Float, DateTime, Enum
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.db.identifiers import new_id
from backend.app.models.parcel_enums import PaymentStatus, DeliveryStatus


class Parcel(Base):
    """
    Parcel model for the delivery platform.

    Payment fields (payment_status, transaction_id, paid_at) are written only
    by the Payment Recorder, together with the matching Payment row.
    """
    __tablename__ = "parcels"

    id = Column(String(36), primary_key=True, default=new_id)

    # Ownership - email of the user who booked the parcel
    created_by = Column(String(255), nullable=False, index=True)

    # Parcel description
    title = Column(String(200), nullable=False)
    parcel_type = Column(String(50), nullable=False, default="document")
    weight_kg = Column(Float, nullable=True)
    cost = Column(Float, nullable=False)

    # Sender / receiver
    sender_name = Column(String(100), nullable=True)
    sender_address = Column(String(500), nullable=True)
    receiver_name = Column(String(100), nullable=True)
    receiver_address = Column(String(500), nullable=True)

    # Delivery
    tracking_id = Column(String(64), unique=True, nullable=True, index=True)
    delivery_status = Column(Enum(DeliveryStatus), default=DeliveryStatus.NOT_COLLECTED, nullable=False)

    # Payment
    payment_status = Column(Enum(PaymentStatus), default=PaymentStatus.UNPAID, nullable=False, index=True)
    transaction_id = Column(String(255), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<Parcel(id={self.id}, title='{self.title}', payment_status='{self.payment_status.value}')>"
