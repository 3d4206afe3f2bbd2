"""
Failure Mode Tests.

Payment gateway errors, timeouts, the circuit breaker around the gateway and
store failures surfacing as 500s.
"""

import time
import pytest
import stripe
from types import SimpleNamespace
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.main import app
from backend.app.core.dependencies import get_payment_gateway
from backend.app.core.exceptions import InvalidArgumentError, InternalError
from backend.app.core.reliability import CircuitBreaker, CircuitOpenError
from backend.app.services.payment_gateway import StripePaymentGateway


def gateway(**kwargs) -> StripePaymentGateway:
    options = {"api_key": "sk_test_dummy", "timeout_seconds": 1.0}
    options.update(kwargs)
    return StripePaymentGateway(**options)


# Circuit breaker

@pytest.mark.asyncio
async def test_circuit_opens_after_threshold():
    breaker = CircuitBreaker(failure_threshold=2, reset_timeout=60, name="test")

    async def failing():
        raise RuntimeError("down")

    for _ in range(2):
        with pytest.raises(RuntimeError):
            await breaker.call(failing)

    assert breaker.state == "OPEN"

    with pytest.raises(CircuitOpenError):
        await breaker.call(failing)


@pytest.mark.asyncio
async def test_circuit_half_open_trial():
    breaker = CircuitBreaker(failure_threshold=1, reset_timeout=10, name="test")

    async def failing():
        raise RuntimeError("down")

    async def working():
        return "ok"

    with pytest.raises(RuntimeError):
        await breaker.call(failing)
    assert breaker.state == "OPEN"

    # Trial call after the reset timeout fails: straight back to OPEN
    breaker.last_failure_time -= 11
    with pytest.raises(RuntimeError):
        await breaker.call(failing)
    assert breaker.state == "OPEN"

    # Next trial succeeds and closes the circuit
    breaker.last_failure_time -= 11
    assert await breaker.call(working) == "ok"
    assert breaker.state == "CLOSED"
    assert breaker.failures == 0


# Payment gateway

@pytest.mark.asyncio
async def test_gateway_sends_amount_and_currency(mocker):
    create = mocker.patch(
        "stripe.PaymentIntent.create",
        return_value=SimpleNamespace(client_secret="pi_1_secret_abc"),
    )

    secret = await gateway(currency="eur").create_payment_intent(2599)

    assert secret == "pi_1_secret_abc"
    create.assert_called_once_with(
        amount=2599,
        currency="eur",
        payment_method_types=["card"],
        api_key="sk_test_dummy",
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, -1, 1.5, "100", True, None])
async def test_gateway_rejects_bad_amounts(mocker, amount):
    create = mocker.patch("stripe.PaymentIntent.create")

    with pytest.raises(InvalidArgumentError) as exc_info:
        await gateway().create_payment_intent(amount)

    assert exc_info.value.message == "Invalid amount"
    create.assert_not_called()


@pytest.mark.asyncio
async def test_gateway_error_message_is_surfaced(mocker):
    mocker.patch(
        "stripe.PaymentIntent.create",
        side_effect=stripe.InvalidRequestError("Amount must be at least 50 cents", "amount"),
    )

    with pytest.raises(InternalError) as exc_info:
        await gateway().create_payment_intent(10)

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Amount must be at least 50 cents"


@pytest.mark.asyncio
async def test_gateway_timeout(mocker):
    def slow_create(**kwargs):
        time.sleep(0.5)
        return SimpleNamespace(client_secret="late")

    mocker.patch("stripe.PaymentIntent.create", side_effect=slow_create)

    with pytest.raises(InternalError) as exc_info:
        await gateway(timeout_seconds=0.05).create_payment_intent(1000)

    assert exc_info.value.message == "Payment gateway timed out"


@pytest.mark.asyncio
async def test_gateway_without_key_is_not_configured(mocker):
    create = mocker.patch("stripe.PaymentIntent.create")

    with pytest.raises(InternalError):
        await gateway(api_key=None).create_payment_intent(1000)

    create.assert_not_called()


@pytest.mark.asyncio
async def test_gateway_circuit_opens_on_repeated_failures(mocker):
    create = mocker.patch(
        "stripe.PaymentIntent.create",
        side_effect=stripe.APIConnectionError("Network is unreachable"),
    )
    flaky = gateway(circuit_breaker=CircuitBreaker(failure_threshold=2, reset_timeout=60, name="stripe"))

    for _ in range(2):
        with pytest.raises(InternalError):
            await flaky.create_payment_intent(1000)

    with pytest.raises(InternalError) as exc_info:
        await flaky.create_payment_intent(1000)

    assert exc_info.value.message == "Payment gateway temporarily unavailable"
    assert create.call_count == 2


@pytest.mark.asyncio
async def test_payment_intent_endpoint_gateway_failure(client, mocker):
    mocker.patch(
        "stripe.PaymentIntent.create",
        side_effect=stripe.APIConnectionError("Network is unreachable"),
    )
    real_gateway = gateway()
    app.dependency_overrides[get_payment_gateway] = lambda: real_gateway

    response = await client.post("/create-payment-intent", json={"amountInCents": 1000})

    assert response.status_code == 500
    assert response.json()["error_code"] == "ERR_INTERNAL_SERVER"


# Store failures

@pytest.mark.asyncio
async def test_payment_history_store_failure(client, alice_headers, mocker):
    mocker.patch.object(
        AsyncSession, "execute",
        side_effect=OperationalError("SELECT", {}, Exception("connection reset")),
    )

    response = await client.get(
        "/payments", params={"email": "alice@example.com"}, headers=alice_headers
    )

    assert response.status_code == 500
    assert response.json()["message"] == "Failed to fetch payments"

