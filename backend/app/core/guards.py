"""
Security guards for identity-based and role-based access control.

Provides dependencies and helpers for protecting endpoints.
"""

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.core.dependencies import get_current_principal
from backend.app.core.exceptions import InsufficientPermissionsError
from backend.app.db.session import get_db
from backend.app.models.enums import UserRole
from backend.app.models.user import User
from backend.app.schemas.auth import Principal


def same_identity(principal: Principal, target_email: str) -> bool:
    """
    Compare the verified identity with a target identity.

    Emails compare case-insensitively.
    """
    if not target_email:
        return False
    return principal.email.strip().lower() == target_email.strip().lower()


def require_self(principal: Principal, target_email: str) -> None:
    """
    Self-only access: the principal may only read its own data.

    Usage:
        @router.get("/payments")
        async def list_payments(email: str, principal: Principal = Depends(get_current_principal)):
            require_self(principal, email)
            ...

    Raises:
        InsufficientPermissionsError: 403 "forbidden access" on mismatch
    """
    if not same_identity(principal, target_email):
        raise InsufficientPermissionsError()


async def get_user_role(db: AsyncSession, email: str) -> UserRole:
    """Role stored for an email; unknown users are plain users."""
    result = await db.execute(select(User.role).where(User.email == email.strip().lower()))
    role = result.scalar_one_or_none()
    return role or UserRole.USER


async def is_admin(db: AsyncSession, principal: Principal) -> bool:
    return await get_user_role(db, principal.email) == UserRole.ADMIN


async def require_admin(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """
    Dependency for admin-only endpoints.

    The admin role lives in the users table, not in the token.

    Usage:
        @router.get("/riders/pending")
        async def list_pending(admin: Principal = Depends(require_admin)):
            ...

    Returns:
        Principal if admin, raises 403 otherwise
    """
    if not await is_admin(db, principal):
        raise InsufficientPermissionsError()
    return principal


class OwnershipGuard:
    """
    Class-based ownership guard: owner or admin.

    Usage:
        ownership_guard = OwnershipGuard()

        @router.delete("/parcels/{parcel_id}")
        async def delete_parcel(...):
            parcel = await load_parcel(db, parcel_id)
            await ownership_guard.enforce(db, parcel.created_by, principal)
            ...
    """

    async def enforce(
        self,
        db: AsyncSession,
        resource_owner_email: str,
        principal: Principal,
    ) -> None:
        """
        Enforce ownership validation, raise 403 if access denied.

        Raises:
            InsufficientPermissionsError: neither owner nor admin
        """
        if same_identity(principal, resource_owner_email):
            return
        if await is_admin(db, principal):
            return
        raise InsufficientPermissionsError()

    async def filter_by_ownership(self, db: AsyncSession, principal: Principal):
        """
        Get the owner email to filter queries by.

        For admins: Returns None (no filtering needed)
        For everyone else: Returns their own email
        """
        if await is_admin(db, principal):
            return None
        return principal.email
