"""
Parcel and payment status enumerations.
"""

import enum


class PaymentStatus(str, enum.Enum):
    """
    Parcel payment status.

    A parcel moves UNPAID → PAID exactly once, in the same transaction that
    inserts its Payment record.
    """
    UNPAID = "unpaid"
    PAID = "paid"


class DeliveryStatus(str, enum.Enum):
    """
    Parcel delivery status enumeration.

    Status flow:
        NOT_COLLECTED → RIDER_ASSIGNED → IN_TRANSIT → DELIVERED
    """
    NOT_COLLECTED = "not_collected"
    RIDER_ASSIGNED = "rider_assigned"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"


class PaymentRecordStatus(str, enum.Enum):
    """Status of a stored Payment. Only successful payments are recorded."""
    SUCCEEDED = "succeeded"
