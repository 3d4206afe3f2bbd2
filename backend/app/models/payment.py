"""
Payment database model.

Immutable record of funds received for one parcel.
"""

from sqlalchemy import Column, String, Float, DateTime, Enum, ForeignKey, UniqueConstraint
from backend.app.db.session import Base
from backend.app.db.identifiers import new_id
from backend.app.models.parcel_enums import PaymentRecordStatus


class Payment(Base):
    """
    Payment model.

    At most one Payment references a given parcel; the unique constraint on
    parcel_id holds that even when two requests race past the status check.
    NO updates or deletions allowed.
    """
    __tablename__ = "payments"
    __table_args__ = (
        UniqueConstraint("parcel_id", name="uq_payments_parcel_id"),
    )

    id = Column(String(36), primary_key=True, default=new_id)

    # Linkage
    parcel_id = Column(String(36), ForeignKey("parcels.id"), nullable=False)

    # Payer and amount
    email = Column(String(255), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    payment_method = Column(String(50), nullable=False)
    transaction_id = Column(String(255), nullable=False)

    status = Column(Enum(PaymentRecordStatus), default=PaymentRecordStatus.SUCCEEDED, nullable=False)

    # Timestamps (Immutable - no updated_at)
    paid_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<Payment(id={self.id}, parcel_id={self.parcel_id}, amount={self.amount})>"
