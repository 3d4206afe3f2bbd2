"""
Rider API endpoints.

Users apply to become riders; admins approve, reject or deactivate them.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from backend.app.db.session import get_db
from backend.app.db.identifiers import is_valid_id
from backend.app.models.rider import Rider
from backend.app.models.user import User
from backend.app.models.enums import RiderStatus, UserRole
from backend.app.schemas.auth import Principal
from backend.app.schemas.rider import RiderApply, RiderStatusUpdate, RiderResponse
from backend.app.core.dependencies import get_current_principal
from backend.app.core.guards import require_admin
from backend.app.core.exceptions import AlreadyExistsError, InvalidArgumentError, ResourceNotFoundError
from backend.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/riders", tags=["Riders"])


@router.post("", response_model=RiderResponse, status_code=status.HTTP_201_CREATED)
async def apply_as_rider(
    application: RiderApply,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Submit a rider application for the caller (status pending)."""
    rider = Rider(
        email=principal.email,
        status=RiderStatus.PENDING,
        **application.model_dump(),
    )
    db.add(rider)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise AlreadyExistsError("Rider application already exists")
    await db.refresh(rider)

    await log_event(
        db=db,
        action=AuditAction.RIDER_APPLIED,
        actor_email=principal.email,
        metadata={"rider_id": rider.id}
    )

    return RiderResponse.model_validate(rider)


async def _list_by_status(db: AsyncSession, rider_status: RiderStatus) -> List[RiderResponse]:
    result = await db.execute(
        select(Rider).where(Rider.status == rider_status).order_by(Rider.created_at.desc())
    )
    return [RiderResponse.model_validate(r) for r in result.scalars().all()]


@router.get("/pending", response_model=List[RiderResponse])
async def list_pending_riders(
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Pending rider applications (admin only)."""
    return await _list_by_status(db, RiderStatus.PENDING)


@router.get("/active", response_model=List[RiderResponse])
async def list_active_riders(
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Active riders (admin only)."""
    return await _list_by_status(db, RiderStatus.ACTIVE)


@router.patch("/{rider_id}/status", response_model=RiderResponse)
async def update_rider_status(
    status_data: RiderStatusUpdate,
    rider_id: str = Path(..., description="Rider ID"),
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Change a rider's status (admin only).

    Approving a rider promotes the matching user to the RIDER role.
    """
    if not is_valid_id(rider_id):
        raise InvalidArgumentError("Invalid rider ID")

    result = await db.execute(select(Rider).where(Rider.id == rider_id))
    rider = result.scalar_one_or_none()
    if not rider:
        raise ResourceNotFoundError("Rider", rider_id)

    previous_status = rider.status
    rider.status = status_data.status

    if status_data.status == RiderStatus.ACTIVE:
        user_result = await db.execute(select(User).where(User.email == rider.email))
        user = user_result.scalar_one_or_none()
        if user and user.role == UserRole.USER:
            user.role = UserRole.RIDER

    await db.commit()
    await db.refresh(rider)

    await log_event(
        db=db,
        action=AuditAction.RIDER_STATUS_CHANGED,
        actor_email=admin.email,
        metadata={
            "rider_id": rider.id,
            "previous_status": previous_status.value,
            "new_status": rider.status.value,
        }
    )

    return RiderResponse.model_validate(rider)
