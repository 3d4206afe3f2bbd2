"""
Rider database model.

A rider application is reviewed by an admin before the rider can take parcels.
"""

from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.db.identifiers import new_id
from backend.app.models.enums import RiderStatus


class Rider(Base):
    __tablename__ = "riders"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(30), nullable=True)
    region = Column(String(100), nullable=True)
    district = Column(String(100), nullable=True)

    status = Column(Enum(RiderStatus), default=RiderStatus.PENDING, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Rider(id={self.id}, email='{self.email}', status='{self.status.value}')>"
