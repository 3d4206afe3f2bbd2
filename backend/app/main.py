"""
FastAPI Application Entry Point.

This is the main application file for the Parcel Delivery Backend.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import Depends, FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from backend.app.core.config import Settings, settings as default_settings
from backend.app.api.v1.router import router as api_v1_router
from backend.app.core.observability import ObservabilityMiddleware, configure_logging
from backend.app.core.redis_client import create_redis_client, get_redis, ping_redis
from backend.app.db.session import Database
from backend.app.services.payment_gateway import StripePaymentGateway
from backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from backend.app.models.user import User
from backend.app.models.audit_log import AuditLog
from backend.app.models.parcel import Parcel
from backend.app.models.payment import Payment
from backend.app.models.rider import Rider
from backend.app.models.tracking_log import TrackingLog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Creates database tables on startup.
    2. Disposes the engine and closes Redis on shutdown.
    """
    await app.state.db.create_all()
    logger.info("%s started", app.state.settings.app_name)
    yield
    await app.state.redis.aclose()
    await app.state.db.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application and its process-wide collaborators.

    The database, Redis client and payment gateway are constructed here once
    and reached by handlers only through dependencies on app.state.
    """
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.api_version,
        debug=settings.debug,
        description="Parcel delivery backend: parcels, riders, tracking and payments",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db = Database.from_settings(settings)
    app.state.redis = create_redis_client(settings)
    app.state.payment_gateway = StripePaymentGateway.from_settings(settings)

    # Register global exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.add_middleware(ObservabilityMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["Health"])
    async def health_check(redis_client=Depends(get_redis)):
        """
        Health check endpoint.

        Reports "degraded" when the token revocation store is unreachable.

        Returns:
            dict: Status, Redis reachability and application information
        """
        redis_ok = await ping_redis(redis_client)
        return {
            "status": "healthy" if redis_ok else "degraded",
            "redis": "ok" if redis_ok else "unavailable",
            "app_name": settings.app_name,
            "version": settings.api_version,
        }

    @app.get("/", tags=["Root"])
    async def root():
        """
        Root endpoint.

        Returns:
            dict: Welcome message and API documentation links
        """
        return {
            "message": "Parcel server is running",
            "docs": "/docs",
            "health": "/health",
        }

    # Include API router
    app.include_router(api_v1_router, prefix=settings.api_prefix)

    return app


app = create_app()
