"""
Audit logging service for tracking payments, parcel lifecycle and admin actions.

Provides centralized logging for compliance and security monitoring.
"""

from typing import Optional, Dict, Any, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from backend.app.models.audit_log import AuditLog


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    TOKEN_REVOKED = "TOKEN_REVOKED"
    USER_CREATED = "USER_CREATED"

    # Parcels
    PARCEL_CREATED = "PARCEL_CREATED"
    PARCEL_DELETED = "PARCEL_DELETED"
    TRACKING_LOGGED = "TRACKING_LOGGED"

    # Payments
    PAYMENT_RECORDED = "PAYMENT_RECORDED"

    # Riders
    RIDER_APPLIED = "RIDER_APPLIED"
    RIDER_STATUS_CHANGED = "RIDER_STATUS_CHANGED"


def build_event(
    action: str,
    actor_email: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Build an audit row without touching the session.

    Used when the event has to be written inside a larger transaction.
    """
    return AuditLog(
        actor_email=actor_email,
        action=action,
        meta_data=metadata,
    )


async def log_event(
    db: AsyncSession,
    action: str,
    actor_email: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """
    Log an event to the audit log and commit it.

    Args:
        db: Database session
        action: Action being performed (use AuditAction constants)
        actor_email: Email of the principal performing the action
        metadata: Additional context as JSON

    Returns:
        Created AuditLog instance
    """
    audit_log = build_event(action, actor_email=actor_email, metadata=metadata)

    db.add(audit_log)
    await db.commit()
    await db.refresh(audit_log)

    return audit_log


async def get_audit_logs(
    db: AsyncSession,
    action: Optional[str] = None,
    actor_email: Optional[str] = None,
    limit: int = 100,
) -> List[AuditLog]:
    """Fetch audit logs, newest first, optionally filtered by action or actor."""
    query = select(AuditLog)

    if action:
        query = query.where(AuditLog.action == action)
    if actor_email:
        query = query.where(AuditLog.actor_email == actor_email)

    query = query.order_by(desc(AuditLog.timestamp), desc(AuditLog.id)).limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all())
