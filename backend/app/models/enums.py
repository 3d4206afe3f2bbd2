"""
User and rider enumerations.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        USER: Books and pays for parcels (default role)
        RIDER: Approved delivery rider
        ADMIN: Manages riders and can see every parcel
    """
    USER = "user"
    RIDER = "rider"
    ADMIN = "admin"


class RiderStatus(str, enum.Enum):
    """
    Rider application status.

    Status flow:
        PENDING → ACTIVE | REJECTED
        ACTIVE → INACTIVE
    """
    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"
    INACTIVE = "inactive"
