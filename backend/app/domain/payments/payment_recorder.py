"""
Payment Recorder (Domain Logic).

Marks a parcel paid and inserts its Payment record as a single transaction.
Must be transactional and idempotent.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.identifiers import is_valid_id
from backend.app.models.parcel import Parcel
from backend.app.models.parcel_enums import PaymentStatus, PaymentRecordStatus
from backend.app.models.payment import Payment
from backend.app.services.audit import AuditAction, build_event

logger = logging.getLogger(__name__)


# Transition results returned by the store layer

@dataclass(frozen=True)
class Applied:
    payment_id: str


@dataclass(frozen=True)
class AlreadyPaid:
    pass


@dataclass(frozen=True)
class ParcelMissing:
    pass


@dataclass(frozen=True)
class Failed:
    reason: str


TransitionResult = Union[Applied, AlreadyPaid, ParcelMissing, Failed]


class InvalidParcelId(ValueError):
    """Raised before any store access when the parcel id is malformed."""


class PaymentRecorder:

    def __init__(self, db: AsyncSession, timeout_seconds: Optional[float] = None):
        self.db = db
        self.timeout_seconds = timeout_seconds

    async def record_payment(
        self,
        parcel_id: str,
        payer_email: str,
        amount: float,
        payment_method: str,
        transaction_id: str,
    ) -> TransitionResult:
        """
        Record a payment for a parcel.

        Flow:
        1. Validate parcel id syntax (no store access on failure)
        2. Idempotency check (existing Payment for the parcel)
        3. Conditional update: UNPAID -> PAID, the compare-and-swap gate
        4. Insert Payment (unique on parcel_id, second gate)
        5. Audit row
        Steps 3-5 share one transaction; any failure rolls all of them back.

        Raises:
            InvalidParcelId: parcel_id is not a well-formed identifier
        """
        if not is_valid_id(parcel_id):
            raise InvalidParcelId(parcel_id)

        try:
            if self.timeout_seconds:
                return await asyncio.wait_for(
                    self._apply(parcel_id, payer_email, amount, payment_method, transaction_id),
                    timeout=self.timeout_seconds,
                )
            return await self._apply(parcel_id, payer_email, amount, payment_method, transaction_id)
        except IntegrityError:
            # Another request inserted the Payment between our check and insert
            logger.info("Payment for parcel %s lost the race to a concurrent request", parcel_id)
            return AlreadyPaid()
        except asyncio.TimeoutError:
            logger.error("Payment transition for parcel %s timed out", parcel_id)
            return Failed("payment transition timed out")
        except SQLAlchemyError as e:
            logger.exception("Payment transition for parcel %s failed", parcel_id)
            return Failed(type(e).__name__)

    async def _apply(
        self,
        parcel_id: str,
        payer_email: str,
        amount: float,
        payment_method: str,
        transaction_id: str,
    ) -> TransitionResult:
        db = self.db

        # Drop any implicit transaction left open by earlier reads on this session
        if db.in_transaction():
            await db.commit()

        async with db.begin():
            # 2. Idempotency check
            existing = await db.execute(
                select(Payment.id).where(Payment.parcel_id == parcel_id)
            )
            if existing.scalar_one_or_none() is not None:
                return AlreadyPaid()

            paid_at = datetime.now(timezone.utc)

            # 3. Compare-and-swap on the parcel's payment status
            result = await db.execute(
                update(Parcel)
                .where(
                    Parcel.id == parcel_id,
                    Parcel.payment_status == PaymentStatus.UNPAID,
                )
                .values(
                    payment_status=PaymentStatus.PAID,
                    transaction_id=transaction_id,
                    paid_at=paid_at,
                )
                .execution_options(synchronize_session=False)
            )

            if result.rowcount == 0:
                found = await db.execute(select(Parcel.id).where(Parcel.id == parcel_id))
                if found.scalar_one_or_none() is None:
                    return ParcelMissing()
                return AlreadyPaid()

            # 4. Payment record
            payment = Payment(
                parcel_id=parcel_id,
                email=payer_email,
                amount=amount,
                payment_method=payment_method,
                transaction_id=transaction_id,
                status=PaymentRecordStatus.SUCCEEDED,
                paid_at=paid_at,
            )
            db.add(payment)
            await db.flush()  # Raises IntegrityError if a Payment already references the parcel

            # 5. Audit, same transaction
            db.add(build_event(
                AuditAction.PAYMENT_RECORDED,
                actor_email=payer_email,
                metadata={
                    "parcel_id": parcel_id,
                    "payment_id": payment.id,
                    "amount": amount,
                    "transaction_id": transaction_id,
                },
            ))

            payment_id = payment.id

        logger.info("Recorded payment %s for parcel %s", payment_id, parcel_id)
        return Applied(payment_id)
