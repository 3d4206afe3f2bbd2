"""
Tracking log database model.

Append-only delivery updates, grouped by the parcel's public tracking id.
"""

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.db.identifiers import new_id


class TrackingLog(Base):
    __tablename__ = "tracking_logs"

    id = Column(String(36), primary_key=True, default=new_id)

    # References
    tracking_id = Column(String(64), nullable=False, index=True)
    parcel_id = Column(String(36), ForeignKey("parcels.id", ondelete="CASCADE"), nullable=True, index=True)

    status = Column(String(50), nullable=False)
    message = Column(String(500), nullable=True)
    updated_by = Column(String(255), nullable=True)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<TrackingLog(tracking_id={self.tracking_id}, status='{self.status}')>"
