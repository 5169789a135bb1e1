"""
Checkout payment endpoints — start/refresh a payment intent, finalize a payment.
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from deps import get_gateway_manager
from domain.responses import success_response
from services import checkout_service
from services.payment_gateway_manager import PaymentGatewayManager

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("/orders/{order_id}/payment")
async def ensure_order_payment(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    manager: PaymentGatewayManager = Depends(get_gateway_manager),
):
    """Create the order's payment intent, or refresh it if one is already open."""
    order = await checkout_service.get_order(db, order_id)
    payment = await checkout_service.ensure_order_payment(db, order, manager)
    return success_response(data=payment)


@router.post("/payments/{payment_id}/finalize")
async def finalize_payment(
    payment_id: int,
    db: AsyncSession = Depends(get_db),
    manager: PaymentGatewayManager = Depends(get_gateway_manager),
):
    payment = await checkout_service.get_payment(db, payment_id)
    order = await checkout_service.finalize_payment(db, payment, manager)
    return success_response(
        data={
            "order_id": str(order.id),
            "reference": order.reference,
            "order_status": order.status,
            "payment_id": str(payment.id),
            "payment_status": payment.status,
        }
    )
