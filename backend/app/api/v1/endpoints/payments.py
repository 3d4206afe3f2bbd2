"""
Payment API Endpoints.

Payment-intent creation at the gateway, payment recording and self-only
payment history.
"""

from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError

from backend.app.db.session import get_db
from backend.app.models.payment import Payment
from backend.app.schemas.auth import Principal
from backend.app.schemas.payment import (
    PaymentIntentCreate, PaymentIntentResponse,
    PaymentCreate, PaymentRecordedResponse, PaymentResponse,
)
from backend.app.core.config import Settings
from backend.app.core.dependencies import get_current_principal, get_payment_gateway, get_settings
from backend.app.core.exceptions import (
    InvalidArgumentError, AlreadyExistsError, ResourceNotFoundError, InternalError,
)
from backend.app.core.guards import require_self
from backend.app.domain.payments.payment_recorder import (
    PaymentRecorder, InvalidParcelId, Applied, AlreadyPaid, ParcelMissing,
)

router = APIRouter(tags=["Payments"])


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    intent_data: PaymentIntentCreate,
    gateway=Depends(get_payment_gateway),
):
    """
    Create a payment intent at the payment gateway.

    Returns the client secret used by the browser to confirm the payment.
    """
    client_secret = await gateway.create_payment_intent(intent_data.amount_in_cents)
    return PaymentIntentResponse(client_secret=client_secret)


@router.get("/payments", response_model=List[PaymentResponse])
async def list_payments(
    email: str = Query(..., description="Payer email; must be the caller's own"),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """
    Payment history for the caller, newest first.

    Self-only: asking for another email is forbidden before anything is read.
    """
    require_self(principal, email)

    try:
        result = await db.execute(
            select(Payment)
            .where(func.lower(Payment.email) == email.strip().lower())
            .order_by(Payment.paid_at.desc())
        )
        payments = result.scalars().all()
    except SQLAlchemyError as e:
        raise InternalError("Failed to fetch payments") from e

    return [PaymentResponse.model_validate(p) for p in payments]


@router.post("/payments", response_model=PaymentRecordedResponse, status_code=status.HTTP_201_CREATED)
async def record_payment(
    payment_data: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Record a completed payment and mark its parcel paid.

    Validates:
    - parcelId is a well-formed identifier (400)
    - Parcel exists (404)
    - No payment exists yet for the parcel (409)
    """
    recorder = PaymentRecorder(db, timeout_seconds=settings.payment_transition_timeout_seconds)

    try:
        outcome = await recorder.record_payment(
            parcel_id=payment_data.parcel_id,
            payer_email=payment_data.email,
            amount=payment_data.amount,
            payment_method=payment_data.payment_method,
            transaction_id=payment_data.transaction_id,
        )
    except InvalidParcelId:
        raise InvalidArgumentError("Invalid parcel ID")

    if isinstance(outcome, Applied):
        return PaymentRecordedResponse(
            inserted_id=outcome.payment_id,
            message="Payment recorded successfully",
        )
    if isinstance(outcome, AlreadyPaid):
        raise AlreadyExistsError("Payment already exists", details={"parcel_id": payment_data.parcel_id})
    if isinstance(outcome, ParcelMissing):
        raise ResourceNotFoundError("Parcel", payment_data.parcel_id)

    raise InternalError("Failed to record payment")
