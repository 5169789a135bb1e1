"""
Payment settings admin endpoints — view/update the active gateway's credentials.
"""

import logging
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from deps import get_gateway_manager
from domain.responses import success_response
from services import payment_settings_service
from services.payment_gateway_manager import PaymentGatewayManager

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin/settings/payments", tags=["payment-settings"])


class PaymentSettingsUpdateRequest(BaseModel):
    publishable_key: str | None = Field(default=None, max_length=255)
    secret_key: str | None = Field(default=None, max_length=255)
    webhook_secret: str | None = Field(default=None, max_length=255)
    is_active: bool | None = None


@router.get("")
async def get_payment_settings(
    db: AsyncSession = Depends(get_db),
    manager: PaymentGatewayManager = Depends(get_gateway_manager),
):
    data = await payment_settings_service.get_payment_settings(db, manager)
    return success_response(data=data)


@router.put("")
async def update_payment_settings(
    request: PaymentSettingsUpdateRequest,
    db: AsyncSession = Depends(get_db),
    manager: PaymentGatewayManager = Depends(get_gateway_manager),
):
    data = await payment_settings_service.update_payment_settings(
        db,
        manager,
        publishable_key=request.publishable_key,
        secret_key=request.secret_key,
        webhook_secret=request.webhook_secret,
        is_active=request.is_active,
    )
    return success_response(data={"message": "Payment settings updated successfully", **data})
