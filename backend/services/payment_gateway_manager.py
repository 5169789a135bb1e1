"""
Payment gateway manager — picks the active gateway and builds its driver.

Nothing is cached: every call re-reads payment_gateways so key rotation and
active/default toggles made by an admin apply on the very next request.
"""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config import Settings, settings as default_settings
from db_models import PaymentGateway
from domain.enums import GatewayKind
from domain.errors import NotFoundError
from domain.gateway_config import load_gateway_config
from services.fake_driver import FakeDriver
from services.payment_driver import PaymentGatewayDriver
from services.stripe_driver import StripeDriver

logger = logging.getLogger(__name__)

DRIVERS: dict[GatewayKind, type[PaymentGatewayDriver]] = {
    GatewayKind.STRIPE: StripeDriver,
    GatewayKind.FAKE: FakeDriver,
}


def resolve_kind(gateway: PaymentGateway) -> GatewayKind:
    """
    Map a gateway row to its GatewayKind: the declared driver first, then the slug.

    Raises:
        NotFoundError: neither value names a known kind
    """
    for candidate in (gateway.driver, gateway.slug):
        if not candidate:
            continue
        try:
            return GatewayKind(candidate.strip().lower())
        except ValueError:
            continue
    raise NotFoundError("Payment gateway driver", str(gateway.driver or gateway.slug))


class PaymentGatewayManager:
    def __init__(self, db: AsyncSession, settings: Settings | None = None):
        self.db = db
        self.settings = settings or default_settings

    async def active_gateway(self) -> PaymentGateway:
        """
        Active gateways win, default first; otherwise the configured fallback slug,
        whether or not that row is active.
        """
        res = await self.db.execute(
            select(PaymentGateway)
            .where(PaymentGateway.is_active == True)  # noqa: E712
            .order_by(PaymentGateway.is_default.desc(), PaymentGateway.id.asc())
            .limit(1)
        )
        gateway = res.scalar_one_or_none()
        if gateway:
            return gateway

        fallback = self.settings.default_payment_gateway
        res = await self.db.execute(
            select(PaymentGateway).where(PaymentGateway.slug == fallback)
        )
        gateway = res.scalar_one_or_none()
        if gateway:
            logger.info(f"No active payment gateway; using configured fallback '{fallback}'")
            return gateway

        raise NotFoundError("Payment gateway", fallback)

    def driver(self, gateway: PaymentGateway) -> PaymentGatewayDriver:
        kind = resolve_kind(gateway)
        config = load_gateway_config(kind, gateway.config)
        logger.debug(f"Building {kind.value} driver for gateway '{gateway.slug}' (id={gateway.id})")
        return DRIVERS[kind](gateway, config, self.settings)

    async def active_driver(self) -> PaymentGatewayDriver:
        return self.driver(await self.active_gateway())
