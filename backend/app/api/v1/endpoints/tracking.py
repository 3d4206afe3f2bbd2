"""
Tracking Log API Endpoints.

Delivery updates keyed by public tracking id.
"""

from datetime import datetime, timezone
from typing import List
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from backend.app.db.session import get_db
from backend.app.db.identifiers import is_valid_id
from backend.app.models.parcel import Parcel
from backend.app.models.tracking_log import TrackingLog
from backend.app.schemas.auth import Principal
from backend.app.schemas.tracking import TrackingCreate, TrackingResponse
from backend.app.core.dependencies import get_current_principal
from backend.app.core.exceptions import InvalidArgumentError, ResourceNotFoundError

router = APIRouter(prefix="/trackings", tags=["Tracking"])


@router.post("", response_model=TrackingResponse, status_code=status.HTTP_201_CREATED)
async def add_tracking_log(
    tracking_data: TrackingCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Append a delivery update, recording who made it."""
    if tracking_data.parcel_id is not None:
        if not is_valid_id(tracking_data.parcel_id):
            raise InvalidArgumentError("Invalid parcel ID")
        parcel = await db.get(Parcel, tracking_data.parcel_id)
        if not parcel:
            raise ResourceNotFoundError("Parcel", tracking_data.parcel_id)

    log = TrackingLog(
        tracking_id=tracking_data.tracking_id,
        parcel_id=tracking_data.parcel_id,
        status=tracking_data.status,
        message=tracking_data.message,
        updated_by=principal.email,
        timestamp=datetime.now(timezone.utc),
    )
    db.add(log)
    await db.commit()
    await db.refresh(log)

    return TrackingResponse.model_validate(log)


@router.get("/{tracking_id}", response_model=List[TrackingResponse])
async def get_tracking_logs(
    tracking_id: str = Path(..., description="Public tracking id"),
    db: AsyncSession = Depends(get_db)
):
    """Delivery updates for a tracking id, oldest first."""
    result = await db.execute(
        select(TrackingLog)
        .where(TrackingLog.tracking_id == tracking_id)
        .order_by(TrackingLog.timestamp.asc())
    )
    return [TrackingResponse.model_validate(t) for t in result.scalars().all()]
