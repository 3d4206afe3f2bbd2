"""
User database model.

Users authenticate with the external identity provider; this table only keeps
their profile and role.
"""

from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.db.identifiers import new_id
from backend.app.models.enums import UserRole


class User(Base):
    """User profile keyed by the identity provider's email."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=True)
    photo_url = Column(String(500), nullable=True)

    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_log_in = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
