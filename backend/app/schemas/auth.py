"""
Authentication Pydantic schemas.

Defines the verified principal attached to authenticated requests.
"""

from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class Principal(BaseModel):
    """
    Verified identity behind a bearer token.

    Built per request by the identity verifier; never persisted.
    """
    uid: Optional[str] = Field(default=None, description="Identity provider subject")
    email: str = Field(..., description="Verified email (the identity)")
    expires_at: datetime = Field(..., description="Token expiry (UTC)")
    claims: Dict[str, Any] = Field(default_factory=dict, description="Raw token claims")

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "Principal":
        return cls(
            uid=claims.get("sub"),
            email=claims["email"],
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
            claims=claims,
        )


class PrincipalResponse(BaseModel):
    """Schema for GET /auth/me."""
    uid: Optional[str] = None
    email: str
    expires_at: datetime


class LogoutResponse(BaseModel):
    message: str
