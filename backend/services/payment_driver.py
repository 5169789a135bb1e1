"""
Payment gateway driver contract.

Every provider integration implements PaymentGatewayDriver. Drivers hold no
state between calls: the caller persists the returned provider_reference on its
Payment row, and passing that Payment back in is what selects the update path.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import TypedDict

from config import Settings, settings as default_settings
from db_models import Order, Payment, PaymentGateway
from domain.enums import GatewayKind
from domain.gateway_config import GatewayConfig


class PaymentIntent(TypedDict):
    provider_reference: str
    client_secret: str
    amount: Decimal
    currency: str


class IntentStatus(TypedDict):
    status: str
    amount: Decimal
    currency: str


class PaymentGatewayDriver(ABC):
    """Capability every payment provider integration must satisfy."""

    kind: GatewayKind

    def __init__(self, gateway: PaymentGateway, config: GatewayConfig, settings: Settings | None = None):
        self._gateway = gateway
        self._config = config
        self._settings = settings or default_settings

    def gateway(self) -> PaymentGateway:
        """The configuration record this driver was built from."""
        return self._gateway

    @abstractmethod
    async def ensure_payment_intent(self, order: Order, payment: Payment | None = None) -> PaymentIntent:
        """
        Create an intent for the order, or refresh the one the payment already points at.

        If payment carries a provider_reference, the same remote intent is updated
        in place (amount, currency, description); otherwise a new one is created.
        """

    @abstractmethod
    async def retrieve_intent(self, provider_reference: str) -> IntentStatus:
        """Read an intent's current status from the provider."""

    @abstractmethod
    def publishable_key(self) -> str:
        """Client-side key; raises ConfigurationError rather than returning blank."""

    @staticmethod
    def existing_reference(payment: Payment | None) -> str | None:
        if payment is None:
            return None
        return payment.provider_reference or None
