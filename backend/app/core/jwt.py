"""
JWT token utilities for authentication.

Bearer tokens are issued by the identity provider and signed with the shared
secret configured in settings. This module encodes (for the provider side and
for tests) and decodes them.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from backend.app.core.config import Settings, settings as default_settings


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
    settings: Optional[Settings] = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Data payload to encode in the token (should include: sub, email)
        expires_delta: Optional custom expiration time
        settings: Settings holding the signing key (defaults to process settings)

    Returns:
        Encoded JWT token string

    Example payload:
        {
            "sub": "Vx2h1c...",
            "email": "jane@example.com",
            "exp": 1234567890
        }
    """
    settings = settings or default_settings
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire})
    if settings.token_issuer and "iss" not in to_encode:
        to_encode["iss"] = settings.token_issuer

    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: Optional[Settings] = None) -> Optional[Dict[str, Any]]:
    """
    Decode and validate a JWT access token.

    Signature, expiry and (when configured) issuer are checked.

    Args:
        token: JWT token string to decode

    Returns:
        Decoded token payload if valid, None otherwise
    """
    settings = settings or default_settings
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            issuer=settings.token_issuer,
        )
    except JWTError:
        return None
