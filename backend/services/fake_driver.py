"""
Fake driver — deterministic stand-in when no real provider is configured.

References are derived from the order id, and every intent reads back as settled.
"""
from __future__ import annotations

from decimal import Decimal

from db_models import Order, Payment
from domain.constants import FAKE_CURRENCY, FAKE_PUBLISHABLE_KEY
from domain.enums import GatewayKind
from services.payment_driver import IntentStatus, PaymentGatewayDriver, PaymentIntent


class FakeDriver(PaymentGatewayDriver):
    kind = GatewayKind.FAKE

    async def ensure_payment_intent(self, order: Order, payment: Payment | None = None) -> PaymentIntent:
        return {
            "provider_reference": self.existing_reference(payment) or f"pi_fake_{order.id}",
            "client_secret": f"cs_fake_{order.id}",
            "amount": order.total_amount,
            "currency": order.currency or FAKE_CURRENCY,
        }

    async def retrieve_intent(self, provider_reference: str) -> IntentStatus:
        return {
            "status": "succeeded",
            "amount": Decimal(0),
            "currency": FAKE_CURRENCY,
        }

    def publishable_key(self) -> str:
        return FAKE_PUBLISHABLE_KEY
