"""
Payment settings service — admin view and edit of the active gateway's credentials.

Secrets are never echoed back in full. Writes land directly on the gateway row;
PaymentGatewayManager re-reads it per request, so rotated keys apply immediately.
"""
import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from database import transaction
from domain.errors import NotFoundError
from services.payment_gateway_manager import PaymentGatewayManager

logger = logging.getLogger(__name__)

_CREDENTIAL_FIELDS = ("publishable_key", "secret_key", "webhook_secret")
_SECRET_FIELDS = ("secret_key", "webhook_secret")


def mask_secret(value: str | None) -> str:
    """'sk_live_abcdef1234' -> '••••1234'; blank stays blank."""
    if not value:
        return ""
    return "••••" + value[-4:] if len(value) > 4 else "••••"


def _placeholder() -> dict:
    # Lets the admin form render before any gateway exists
    return {
        "id": None,
        "name": "Stripe",
        "slug": "stripe",
        "is_active": False,
        "config": {field: "" for field in _CREDENTIAL_FIELDS},
    }


async def get_payment_settings(db: AsyncSession, manager: PaymentGatewayManager) -> dict:
    try:
        gateway = await manager.active_gateway()
    except NotFoundError:
        return {"gateway": _placeholder()}

    config = gateway.config or {}
    return {
        "gateway": {
            "id": str(gateway.id),
            "name": gateway.name,
            "slug": gateway.slug,
            "is_active": gateway.is_active,
            "config": {
                "publishable_key": config.get("publishable_key") or "",
                **{field: mask_secret(config.get(field)) for field in _SECRET_FIELDS},
            },
        }
    }


async def update_payment_settings(
    db: AsyncSession,
    manager: PaymentGatewayManager,
    *,
    publishable_key: str | None = None,
    secret_key: str | None = None,
    webhook_secret: str | None = None,
    is_active: bool | None = None,
) -> dict:
    """
    Merge the provided credentials into the active gateway's config.

    Raises:
        NotFoundError: no gateway is active and the fallback slug has no row
    """
    gateway = await manager.active_gateway()

    provided = {
        "publishable_key": publishable_key,
        "secret_key": secret_key,
        "webhook_secret": webhook_secret,
    }
    changes = {k: v for k, v in provided.items() if v is not None}

    async with transaction(db):
        # Reassign so the JSON column is flagged dirty
        gateway.config = {**(gateway.config or {}), **changes}
        if is_active is not None:
            gateway.is_active = is_active
        gateway.updated_at = datetime.utcnow()
        await db.flush()

    logger.info(
        f"Payment settings updated for gateway '{gateway.slug}' "
        f"(fields: {', '.join(sorted(changes)) or 'none'}, is_active={gateway.is_active})"
    )
    return await get_payment_settings(db, manager)
