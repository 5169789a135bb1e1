"""
Checkout payment service — drives the active gateway for an order.

Flow:
    1. ensure_order_payment(): resolve active gateway + driver, reuse the open
       Payment for that gateway if any, ensure the provider intent, persist the
       returned provider_reference so the next call takes the update path
    2. finalize_payment(): read the intent back; settled → payment succeeded and
       order pending, anything else → payment failed and order payment_failed
"""
import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database import transaction
from db_models import Order, Payment, PaymentGateway
from domain.constants import OPEN_PAYMENT_STATUSES, SETTLED_INTENT_STATUSES
from domain.enums import OrderState, PaymentStatus
from domain.errors import NotFoundError, ProviderError
from services.payment_gateway_manager import PaymentGatewayManager

logger = logging.getLogger(__name__)


async def get_order(db: AsyncSession, order_id: int) -> Order:
    order = await db.get(Order, order_id)
    if not order:
        raise NotFoundError("Order", str(order_id))
    return order


async def get_payment(db: AsyncSession, payment_id: int) -> Payment:
    payment = await db.get(Payment, payment_id)
    if not payment:
        raise NotFoundError("Payment", str(payment_id))
    return payment


async def _open_payment(db: AsyncSession, *, order_id: int, gateway_id: int) -> Payment | None:
    res = await db.execute(
        select(Payment)
        .where(
            Payment.order_id == order_id,
            Payment.payment_gateway_id == gateway_id,
            Payment.status.in_(OPEN_PAYMENT_STATUSES),
        )
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .limit(1)
    )
    return res.scalar_one_or_none()


async def ensure_order_payment(
    db: AsyncSession,
    order: Order,
    manager: PaymentGatewayManager,
) -> dict:
    """
    Create or refresh the provider intent for an order and record it on a Payment.

    Returns:
        dict with payment_id, gateway, publishable_key and the intent fields
    """
    gateway = await manager.active_gateway()
    driver = manager.driver(gateway)
    publishable_key = driver.publishable_key()

    payment = await _open_payment(db, order_id=order.id, gateway_id=gateway.id)
    intent = await driver.ensure_payment_intent(order, payment)

    async with transaction(db):
        if payment is None:
            payment = Payment(
                order_id=order.id,
                payment_gateway_id=gateway.id,
                provider_reference=intent["provider_reference"],
                status=PaymentStatus.PENDING.value,
                amount=intent["amount"],
                currency=intent["currency"],
                meta={"client_secret": intent["client_secret"]},
            )
            db.add(payment)
        else:
            payment.provider_reference = intent["provider_reference"]
            payment.amount = intent["amount"]
            payment.currency = intent["currency"]
            payment.meta = {**(payment.meta or {}), "client_secret": intent["client_secret"]}
            payment.updated_at = datetime.utcnow()
        await db.flush()

    logger.info(
        f"Order {order.id} payment {payment.id} ready on gateway '{gateway.slug}' "
        f"(intent {intent['provider_reference']})"
    )
    return {
        "payment_id": str(payment.id),
        "gateway": gateway.slug,
        "publishable_key": publishable_key,
        "provider_reference": intent["provider_reference"],
        "client_secret": intent["client_secret"],
        "amount": str(intent["amount"]),
        "currency": intent["currency"],
    }


async def finalize_payment(
    db: AsyncSession,
    payment: Payment,
    manager: PaymentGatewayManager,
) -> Order:
    """
    Confirm a payment against the provider and move the order on.

    Raises:
        ProviderError: the intent has not settled (payment and order are marked failed first)
    """
    if not payment.provider_reference:
        raise ProviderError("Payment has no provider intent to finalize.")

    gateway = await db.get(PaymentGateway, payment.payment_gateway_id)
    if gateway is None:
        raise NotFoundError("Payment gateway", str(payment.payment_gateway_id))
    driver = manager.driver(gateway)
    intent = await driver.retrieve_intent(payment.provider_reference)

    order = await get_order(db, payment.order_id)
    settled = intent["status"] in SETTLED_INTENT_STATUSES

    async with transaction(db):
        if settled:
            payment.status = PaymentStatus.SUCCEEDED.value
            payment.meta = {
                **(payment.meta or {}),
                "intent": {k: str(v) for k, v in intent.items()},
            }
            order.status = OrderState.PENDING.value
        else:
            payment.status = PaymentStatus.FAILED.value
            order.status = OrderState.PAYMENT_FAILED.value
        payment.updated_at = datetime.utcnow()
        await db.flush()

    if not settled:
        logger.warning(f"Payment {payment.id} not settled (provider status '{intent['status']}')")
        raise ProviderError("Payment has not succeeded.", details={"status": intent["status"]})

    logger.info(f"Payment {payment.id} settled; order {order.id} moved to pending")
    return order
