"""
User Pydantic schemas.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional
from backend.app.models.enums import UserRole


class UserCreate(BaseModel):
    """
    Schema for user registration.

    Role is never taken from the client; new users are always USER.
    """
    email: EmailStr = Field(..., description="User email address")
    name: Optional[str] = Field(None, max_length=100)
    photo_url: Optional[str] = Field(None, max_length=500)


class UserResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    photo_url: Optional[str] = None
    role: UserRole
    created_at: datetime
    last_log_in: datetime

    class Config:
        from_attributes = True


class UserRegisteredResponse(BaseModel):
    message: str
    inserted: bool
    user: UserResponse


class RoleResponse(BaseModel):
    role: UserRole
