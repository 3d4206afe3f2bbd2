"""
Request logging and correlation IDs.

Every request gets a correlation id (taken from X-Correlation-ID when the
caller sends one) that is stored on request.state, echoed back in the
response headers and written into the access log line together with the
matched route and, for authenticated calls, the verified principal.
"""

import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("parcel_delivery.access")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
CORRELATION_HEADER = "X-Correlation-ID"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def route_template(request: Request) -> str:
    """Path template of the matched route, e.g. /parcels/{parcel_id}."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """
    Access log middleware.

    The identity verifier records the caller on request.state.principal_email;
    anonymous requests are logged as "-".
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex
        request.state.correlation_id = correlation_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        response.headers[CORRELATION_HEADER] = correlation_id
        response.headers["X-Process-Time"] = str(elapsed_ms)

        principal = getattr(request.state, "principal_email", None) or "-"
        level = logging.INFO
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING

        logger.log(
            level,
            "%s %s %s -> %d in %.2fms principal=%s correlation_id=%s",
            request.method,
            route_template(request),
            request.url.path,
            response.status_code,
            elapsed_ms,
            principal,
            correlation_id,
            extra={
                "correlation_id": correlation_id,
                "route": route_template(request),
                "status_code": response.status_code,
                "principal": principal,
            },
        )

        return response
