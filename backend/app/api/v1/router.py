"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.v1.endpoints import auth, payments, parcels, users, riders, tracking

router = APIRouter()

# Identity
router.include_router(auth.router)
router.include_router(users.router)

# Payments (create-payment-intent, payments)
router.include_router(payments.router)

# Parcels and delivery
router.include_router(parcels.router)
router.include_router(tracking.router)
router.include_router(riders.router)
