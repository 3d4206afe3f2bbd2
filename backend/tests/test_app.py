"""
Application wiring tests: health, correlation ids, configuration.
"""

import logging
import pytest

from backend.app.main import create_app
from backend.app.core.config import Settings
from backend.app.db.session import Database
from backend.app.services.payment_gateway import StripePaymentGateway


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["redis"] == "ok"


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")

    assert response.json()["message"] == "Parcel server is running"


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "req-42"})

    assert response.headers["X-Correlation-ID"] == "req-42"
    assert "X-Process-Time" in response.headers


@pytest.mark.asyncio
async def test_correlation_id_generated_on_errors(client):
    response = await client.get("/payments", params={"email": "alice@example.com"})

    assert response.status_code == 401
    assert response.headers["X-Correlation-ID"]


@pytest.mark.asyncio
async def test_access_log_names_principal_and_correlation_id(client, alice_headers, caplog):
    with caplog.at_level(logging.INFO, logger="parcel_delivery.access"):
        await client.get(
            "/payments",
            params={"email": "alice@example.com"},
            headers={**alice_headers, "X-Correlation-ID": "req-77"},
        )
        await client.get("/payments", params={"email": "alice@example.com"})

    records = [r for r in caplog.records if r.name == "parcel_delivery.access"]
    authenticated, anonymous = records

    assert authenticated.principal == "alice@example.com"
    assert authenticated.status_code == 200
    assert authenticated.correlation_id == "req-77"
    assert "principal=alice@example.com" in authenticated.getMessage()

    assert anonymous.principal == "-"
    assert anonymous.status_code == 401
    assert anonymous.levelno == logging.WARNING


@pytest.mark.asyncio
async def test_health_reports_unreachable_redis(client):
    from redis.exceptions import ConnectionError as RedisConnectionError
    from backend.app.main import app
    from backend.app.core.redis_client import get_redis

    class DownRedis:
        async def ping(self):
            raise RedisConnectionError("Connection refused")

    async def down():
        return DownRedis()

    app.dependency_overrides[get_redis] = down

    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"
    assert response.json()["redis"] == "unavailable"

def test_create_app_wires_collaborators():
    settings = Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        stripe_secret_key="sk_test_wiring",
        stripe_currency="eur",
        api_prefix="/api/v1",
    )

    app = create_app(settings)

    assert app.state.settings is settings
    assert isinstance(app.state.db, Database)
    assert isinstance(app.state.payment_gateway, StripePaymentGateway)
    assert app.state.payment_gateway.currency == "eur"
    assert app.url_path_for("record_payment") == "/api/v1/payments"
