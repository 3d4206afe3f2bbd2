"""
Authentication API endpoints.

Tokens are issued by the identity provider; this API only reports on and
revokes them.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.db.session import get_db
from backend.app.schemas.auth import Principal, PrincipalResponse, LogoutResponse
from backend.app.core.dependencies import get_current_principal, get_bearer_token
from backend.app.core.redis_client import get_redis
from backend.app.core.token_revocation import revoke_token
from backend.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get("/me", response_model=PrincipalResponse)
async def get_current_principal_info(
    principal: Principal = Depends(get_current_principal),
):
    """
    Get the verified principal behind the bearer token.

    Requires valid token in Authorization header.
    """
    return PrincipalResponse(
        uid=principal.uid,
        email=principal.email,
        expires_at=principal.expires_at,
    )


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    principal: Principal = Depends(get_current_principal),
    token: str = Depends(get_bearer_token),
    redis_client=Depends(get_redis),
    db: AsyncSession = Depends(get_db),
):
    """
    Revoke the presented token until it would have expired.
    """
    await revoke_token(redis_client, token, principal.email, principal.expires_at)

    await log_event(
        db=db,
        action=AuditAction.TOKEN_REVOKED,
        actor_email=principal.email,
        metadata={"uid": principal.uid}
    )

    return LogoutResponse(message="Logged out successfully")
