"""
Payment gateway client (Stripe).

Creates payment intents and hands back the client secret the front end needs
to confirm the card payment. Does not touch the database.
"""

import asyncio
import logging
from typing import Optional

import stripe

from backend.app.core.config import Settings
from backend.app.core.exceptions import InvalidArgumentError, InternalError
from backend.app.core.reliability import CircuitBreaker, CircuitOpenError

logger = logging.getLogger(__name__)


class StripePaymentGateway:
    """Thin async wrapper around the synchronous Stripe SDK."""

    def __init__(
        self,
        api_key: Optional[str],
        currency: str = "usd",
        timeout_seconds: float = 10.0,
        circuit_breaker: Optional[CircuitBreaker] = None,
    ):
        self.api_key = api_key
        self.currency = currency
        self.timeout_seconds = timeout_seconds
        self.circuit_breaker = circuit_breaker or CircuitBreaker(name="stripe")

        if not api_key:
            logger.warning("No Stripe API key configured - payment intents will fail")
        elif api_key.startswith("sk_test_"):
            logger.info("Stripe TEST MODE active")

    @classmethod
    def from_settings(cls, settings: Settings) -> "StripePaymentGateway":
        return cls(
            api_key=settings.stripe_secret_key,
            currency=settings.stripe_currency,
            timeout_seconds=settings.stripe_timeout_seconds,
            circuit_breaker=CircuitBreaker(
                failure_threshold=settings.gateway_failure_threshold,
                reset_timeout=settings.gateway_reset_timeout_seconds,
                name="stripe",
            ),
        )

    async def create_payment_intent(self, amount_in_cents: int) -> str:
        """
        Create a card payment intent and return its client secret.

        Raises:
            InvalidArgumentError: amount is not a positive integer
            InternalError: Stripe rejected the call, timed out, or the circuit is open
        """
        if isinstance(amount_in_cents, bool) or not isinstance(amount_in_cents, int) or amount_in_cents <= 0:
            raise InvalidArgumentError("Invalid amount")

        if not self.api_key:
            raise InternalError("Payment gateway is not configured")

        try:
            intent = await self.circuit_breaker.call(self._create_intent, amount_in_cents)
        except CircuitOpenError:
            raise InternalError("Payment gateway temporarily unavailable")
        except asyncio.TimeoutError:
            logger.error("Stripe payment intent timed out after %.1fs", self.timeout_seconds)
            raise InternalError("Payment gateway timed out")
        except stripe.StripeError as e:
            logger.error("Failed to create Stripe payment intent: %s", e)
            raise InternalError(e.user_message or str(e))

        return intent.client_secret

    async def _create_intent(self, amount_in_cents: int):
        return await asyncio.wait_for(
            asyncio.to_thread(
                stripe.PaymentIntent.create,
                amount=amount_in_cents,
                currency=self.currency,
                payment_method_types=["card"],
                api_key=self.api_key,
            ),
            timeout=self.timeout_seconds,
        )
