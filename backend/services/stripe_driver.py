"""
Stripe driver — PaymentIntents through the official stripe SDK.

- Amounts go to Stripe in minor units (total * 100, rounded half-up)
- Currency is lowercased for Stripe and uppercased on the way back
- Every stripe.StripeError is translated to ProviderError; callers never see SDK types
- The SDK is synchronous, so calls run on the shared thread pool with an explicit timeout
"""
from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP

import stripe
from stripe import RequestsClient, StripeClient

from config import Settings
from db_models import Order, Payment, PaymentGateway
from domain.enums import GatewayKind
from domain.errors import ConfigurationError, ProviderError, ProviderUnavailableError
from domain.gateway_config import StripeConfig
from services.async_executor import run_blocking
from services.payment_driver import IntentStatus, PaymentGatewayDriver, PaymentIntent

logger = logging.getLogger(__name__)

_MINOR_UNITS = Decimal(100)


def to_minor_units(amount) -> int:
    """Decimal major-unit amount -> integer minor units, rounded half-up (never truncated)."""
    return int((Decimal(str(amount)) * _MINOR_UNITS).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount: int) -> Decimal:
    return Decimal(int(amount)) / _MINOR_UNITS


def _translate(exc: stripe.StripeError) -> ProviderError:
    message = getattr(exc, "user_message", None) or str(exc) or "Payment provider request failed"
    if isinstance(exc, stripe.APIConnectionError):
        return ProviderUnavailableError(message)
    return ProviderError(message)


class StripeDriver(PaymentGatewayDriver):
    kind = GatewayKind.STRIPE

    def __init__(self, gateway: PaymentGateway, config: StripeConfig, settings: Settings | None = None):
        super().__init__(gateway, config, settings)
        if not config.secret_key:
            raise ConfigurationError("Stripe secret key is not configured.")

        self._client = StripeClient(
            config.secret_key,
            max_network_retries=0,
            http_client=RequestsClient(timeout=self._settings.stripe_timeout_seconds),
        )

    async def ensure_payment_intent(self, order: Order, payment: Payment | None = None) -> PaymentIntent:
        amount = to_minor_units(order.total_amount)
        currency = (order.currency or self._settings.default_currency).lower()
        description = f"Order {order.reference} – Jewellery export transaction"
        reference = self.existing_reference(payment)

        common = {"amount": amount, "currency": currency, "description": description}
        if self._settings.stripe_statement_descriptor:
            common["statement_descriptor"] = self._settings.stripe_statement_descriptor

        try:
            if reference:
                intent = await run_blocking(
                    self._client.payment_intents.update,
                    reference,
                    params=common,
                )
            else:
                intent = await run_blocking(
                    self._client.payment_intents.create,
                    params={
                        **common,
                        "payment_method_types": ["card"],
                        "metadata": {
                            "order_id": str(order.id),
                            "order_reference": order.reference,
                        },
                    },
                )
        except stripe.StripeError as e:
            logger.warning(f"Stripe intent {'update' if reference else 'create'} failed for order {order.id}: {e}")
            raise _translate(e) from e

        logger.info(f"Stripe intent {intent.id} {'updated' if reference else 'created'} for order {order.id}")
        return {
            "provider_reference": intent.id,
            "client_secret": intent.client_secret or "",
            "amount": from_minor_units(intent.amount),
            "currency": str(intent.currency).upper(),
        }

    async def retrieve_intent(self, provider_reference: str) -> IntentStatus:
        try:
            intent = await run_blocking(self._client.payment_intents.retrieve, provider_reference)
        except stripe.StripeError as e:
            logger.warning(f"Stripe intent retrieve failed for {provider_reference}: {e}")
            raise _translate(e) from e

        return {
            "status": intent.status,
            "amount": from_minor_units(intent.amount),
            "currency": str(intent.currency).upper(),
        }

    def publishable_key(self) -> str:
        if not self._config.publishable_key:
            raise ConfigurationError("Stripe publishable key is not configured.")
        return self._config.publishable_key
