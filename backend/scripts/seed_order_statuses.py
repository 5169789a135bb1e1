"""
Seed: standard order-status workflow and a fallback fake payment gateway.

Statuses are matched by name, then by slug, so re-running only refreshes
names, colours and positions. "Pending Payment" becomes the single default. A 'fake' gateway row is
added only when no gateway exists yet.

Run from the backend/ directory:
    python scripts/seed_order_statuses.py
"""
import asyncio
import os
import sys

# Add backend/ to path so we can import config
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import OrderStatus, PaymentGateway
from services import order_status_service

STANDARD_STATUSES = [
    # (name, slug, color, is_default)
    ("Pending Payment", "pending-payment", "#F59E0B", True),
    ("Pending", "pending", "#F59E0B", False),
    ("Payment Failed", "payment-failed", "#EF4444", False),
    ("Approved", "approved", "#10B981", False),
    ("Awaiting Materials", "awaiting-materials", "#6366F1", False),
    ("In Production", "in-production", "#6366F1", False),
    ("Quality Check", "quality-check", "#3B82F6", False),
    ("Ready to Dispatch", "ready-to-dispatch", "#8B5CF6", False),
    ("Dispatched", "dispatched", "#0E244D", False),
    ("Delivered", "delivered", "#10B981", False),
    ("Cancelled", "cancelled", "#EF4444", False),
    ("Paid", "paid", "#10B981", False),
]


async def seed(db: AsyncSession) -> dict:
    """Upsert the standard statuses and make sure some gateway exists."""
    created = updated = 0

    # Clear every default first so the seeded one ends up alone
    await order_status_service.unset_defaults(db)

    for position, (name, slug, color, is_default) in enumerate(STANDARD_STATUSES):
        # Name first: an admin row may already own this name under a suffixed slug
        res = await db.execute(select(OrderStatus).where(OrderStatus.name == name))
        status = res.scalar_one_or_none()
        if status is None:
            res = await db.execute(select(OrderStatus).where(OrderStatus.slug == slug))
            status = res.scalar_one_or_none()
        if status is None:
            db.add(OrderStatus(
                name=name,
                slug=slug,
                color=color,
                is_default=is_default,
                is_active=True,
                position=position,
            ))
            created += 1
        else:
            status.name = name
            status.color = color
            status.is_default = is_default
            status.is_active = True
            status.position = position
            updated += 1
        await db.flush()

    gateway_count = (await db.execute(select(func.count()).select_from(PaymentGateway))).scalar_one()
    gateway_created = False
    if gateway_count == 0:
        db.add(PaymentGateway(
            name="Fake Gateway",
            slug="fake",
            driver="fake",
            is_active=True,
            is_default=True,
            config={},
        ))
        gateway_created = True

    await db.commit()
    return {"created": created, "updated": updated, "gateway_created": gateway_created}


async def main():
    from database import async_session, init_db

    await init_db()
    async with async_session() as db:
        result = await seed(db)

    print(f"✅ Order statuses seeded: {result['created']} created, {result['updated']} updated")
    if result["gateway_created"]:
        print("   - Added fallback 'fake' payment gateway")


if __name__ == "__main__":
    asyncio.run(main())
