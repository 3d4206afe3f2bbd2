"""
Authentication dependencies for FastAPI.

This module provides the identity verifier that protects routes with bearer
tokens, plus accessors for the process-wide collaborators stored on app.state.
"""

import logging
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from backend.app.core.config import Settings
from backend.app.core.exceptions import AuthenticationError
from backend.app.core.jwt import decode_access_token
from backend.app.core.redis_client import get_redis
from backend.app.core.token_revocation import is_token_revoked
from backend.app.schemas.auth import Principal

logger = logging.getLogger(__name__)

# HTTP Bearer security scheme; missing credentials are reported by us as 401
security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_payment_gateway(request: Request):
    return request.app.state.payment_gateway


async def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Extract <token> from 'Authorization: Bearer <token>'."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    return credentials.credentials


async def get_current_principal(
    request: Request,
    token: str = Depends(get_bearer_token),
    redis_client=Depends(get_redis),
    settings: Settings = Depends(get_settings),
) -> Principal:
    """
    FastAPI dependency for bearer-token authentication.

    Checks, in order:
    1. Header present and of the form "Bearer <token>"
    2. Token signature, expiry and issuer
    3. Token carries an email claim (the principal's identity)
    4. Token has not been revoked (logout)

    Returns:
        The verified Principal

    Raises:
        AuthenticationError: 401 "unauthorized access" for any failure above
        InternalError: 500 if the revocation store cannot be reached
    """
    # 1-2. Decode and validate JWT
    claims = decode_access_token(token, settings=settings)
    if claims is None:
        logger.info("Rejected bearer token: invalid or expired")
        raise AuthenticationError()

    # 3. Identity claim
    if not claims.get("email") or "exp" not in claims:
        logger.info("Rejected bearer token: missing identity claims")
        raise AuthenticationError()

    # 4. Revocation
    if await is_token_revoked(redis_client, token):
        logger.info("Rejected bearer token: revoked")
        raise AuthenticationError()

    principal = Principal.from_claims(claims)
    # Picked up by the access log
    request.state.principal_email = principal.email
    return principal
