"""
Parcel Management API Endpoints.

Users book parcels and see their own; admins see and delete any.
"""

from datetime import datetime, timezone
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from backend.app.db.session import get_db
from backend.app.db.identifiers import is_valid_id
from backend.app.models.parcel import Parcel
from backend.app.models.parcel_enums import PaymentStatus
from backend.app.schemas.auth import Principal
from backend.app.schemas.parcel import ParcelCreate, ParcelResponse, MessageResponse
from backend.app.core.dependencies import get_current_principal
from backend.app.core.exceptions import (
    InvalidArgumentError, ResourceNotFoundError, AlreadyExistsError,
)
from backend.app.core.guards import OwnershipGuard, require_self, is_admin
from backend.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/parcels", tags=["Parcels"])
ownership_guard = OwnershipGuard()


async def load_parcel(db: AsyncSession, parcel_id: str) -> Parcel:
    """Fetch a parcel by id, validating the id first."""
    if not is_valid_id(parcel_id):
        raise InvalidArgumentError("Invalid parcel ID")

    result = await db.execute(select(Parcel).where(Parcel.id == parcel_id))
    parcel = result.scalar_one_or_none()

    if not parcel:
        raise ResourceNotFoundError("Parcel", parcel_id)

    return parcel


@router.get("", response_model=List[ParcelResponse])
async def list_parcels(
    email: Optional[str] = Query(None, description="Owner email"),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """
    List parcels, newest first.

    With ?email= the caller must be that owner (admins may ask for anyone).
    Without it admins see every parcel and other users see their own.
    """
    if email is not None:
        if not await is_admin(db, principal):
            require_self(principal, email)
        owner = email
    else:
        owner = await ownership_guard.filter_by_ownership(db, principal)

    query = select(Parcel)
    if owner is not None:
        query = query.where(Parcel.created_by == owner)
    query = query.order_by(Parcel.created_at.desc())

    result = await db.execute(query)
    return [ParcelResponse.model_validate(p) for p in result.scalars().all()]


@router.get("/{parcel_id}", response_model=ParcelResponse)
async def get_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Get a single parcel (owner or admin)."""
    parcel = await load_parcel(db, parcel_id)
    await ownership_guard.enforce(db, parcel.created_by, principal)
    return ParcelResponse.model_validate(parcel)


@router.post("", response_model=ParcelResponse, status_code=status.HTTP_201_CREATED)
async def create_parcel(
    parcel_data: ParcelCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """
    Book a new parcel owned by the caller.

    Payment fields always start unpaid; they are only changed by POST /payments.
    """
    new_parcel = Parcel(
        created_by=principal.email,
        payment_status=PaymentStatus.UNPAID,
        created_at=datetime.now(timezone.utc),
        **parcel_data.model_dump(),
    )

    db.add(new_parcel)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise AlreadyExistsError(
            f"Parcel with tracking id '{parcel_data.tracking_id}' already exists"
        )
    await db.refresh(new_parcel)

    # Audit log
    await log_event(
        db=db,
        action=AuditAction.PARCEL_CREATED,
        actor_email=principal.email,
        metadata={
            "parcel_id": new_parcel.id,
            "tracking_id": new_parcel.tracking_id,
            "cost": new_parcel.cost,
        }
    )

    return ParcelResponse.model_validate(new_parcel)


@router.delete("/{parcel_id}", response_model=MessageResponse)
async def delete_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a parcel (owner or admin).

    Paid parcels keep their immutable payment record and cannot be deleted.
    """
    parcel = await load_parcel(db, parcel_id)
    await ownership_guard.enforce(db, parcel.created_by, principal)

    if parcel.payment_status == PaymentStatus.PAID:
        raise InvalidArgumentError("Paid parcels cannot be deleted")

    await db.delete(parcel)
    await db.commit()

    await log_event(
        db=db,
        action=AuditAction.PARCEL_DELETED,
        actor_email=principal.email,
        metadata={"parcel_id": parcel_id}
    )

    return MessageResponse(message="Parcel deleted successfully")
