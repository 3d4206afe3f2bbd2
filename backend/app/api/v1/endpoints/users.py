"""
User API endpoints.

Registration of identity-provider users and role lookup.
"""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from backend.app.db.session import get_db
from backend.app.models.user import User
from backend.app.models.enums import UserRole
from backend.app.schemas.auth import Principal
from backend.app.schemas.user import UserCreate, UserResponse, UserRegisteredResponse, RoleResponse
from backend.app.core.dependencies import get_current_principal
from backend.app.core.guards import same_identity, is_admin
from backend.app.core.exceptions import InsufficientPermissionsError, ResourceNotFoundError
from backend.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/users", tags=["Users"])


async def _find_user(db: AsyncSession, email: str):
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


@router.post("", response_model=UserRegisteredResponse)
async def register_user(
    user_data: UserCreate,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a user after their first sign-in with the identity provider.

    Repeat registrations only refresh last_log_in and return 200.
    """
    email = user_data.email.lower()
    now = datetime.now(timezone.utc)

    existing = await _find_user(db, email)
    if existing:
        existing.last_log_in = now
        await db.commit()
        await db.refresh(existing)
        return UserRegisteredResponse(
            message="User already exists",
            inserted=False,
            user=UserResponse.model_validate(existing),
        )

    new_user = User(
        email=email,
        name=user_data.name,
        photo_url=user_data.photo_url,
        role=UserRole.USER,
        last_log_in=now,
    )
    db.add(new_user)
    try:
        await db.commit()
    except IntegrityError:
        # Concurrent first sign-in registered the same email
        await db.rollback()
        existing = await _find_user(db, email)
        return UserRegisteredResponse(
            message="User already exists",
            inserted=False,
            user=UserResponse.model_validate(existing),
        )
    await db.refresh(new_user)

    await log_event(
        db=db,
        action=AuditAction.USER_CREATED,
        actor_email=email,
        metadata={"user_id": new_user.id}
    )

    response.status_code = status.HTTP_201_CREATED
    return UserRegisteredResponse(
        message="User created",
        inserted=True,
        user=UserResponse.model_validate(new_user),
    )


@router.get("/{email}/role", response_model=RoleResponse)
async def get_role(
    email: str = Path(..., description="User email"),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Role of a user (self or admin)."""
    if not same_identity(principal, email) and not await is_admin(db, principal):
        raise InsufficientPermissionsError()

    user = await _find_user(db, email.lower())
    if not user:
        raise ResourceNotFoundError("User", email)

    return RoleResponse(role=user.role)
