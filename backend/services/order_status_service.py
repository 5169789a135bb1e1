"""
Order status service — the order-status taxonomy and its single-default invariant.

Rules:
    - At most one status is default; once one is, exactly one stays default
    - Making a status default unsets every other default in the same transaction
    - Slugs are derived from names and unique across the table
    - The default status cannot be deleted (singly or in bulk) while others exist

Invariant checks run before any mutation, so a rejected call changes nothing.
"""
import logging
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import transaction
from db_models import OrderStatus
from domain.constants import (
    BULK_DEFAULT_STATUS_MESSAGE,
    DEFAULT_STATUS_MESSAGE,
    STATUS_WRITE_ATTEMPTS,
    UNSET_DEFAULT_STATUS_MESSAGE,
)
from domain.errors import ConflictError, NotFoundError
from domain.responses import page_meta
from services.slug_service import generate_unique_slug

logger = logging.getLogger(__name__)

DUPLICATE_NAME_MESSAGE = "Order status with this name already exists"


def serialize_status(status: OrderStatus) -> dict:
    return {
        "id": str(status.id),
        "name": status.name,
        "slug": status.slug,
        "color": status.color,
        "is_default": status.is_default,
        "is_active": status.is_active,
        "position": status.position,
        "created_at": status.created_at.isoformat() if status.created_at else None,
        "updated_at": status.updated_at.isoformat() if status.updated_at else None,
    }


# ════════════════════════════════════════════════════════════════════
# Lookups
# ════════════════════════════════════════════════════════════════════


async def _name_taken(db: AsyncSession, name: str, exclude_id: Optional[int] = None) -> bool:
    q = select(OrderStatus.id).where(OrderStatus.name == name)
    if exclude_id is not None:
        q = q.where(OrderStatus.id != exclude_id)
    res = await db.execute(q.limit(1))
    return res.scalar_one_or_none() is not None


async def _slug_taken(db: AsyncSession, slug: str, exclude_id: Optional[int]) -> bool:
    q = select(OrderStatus.id).where(OrderStatus.slug == slug)
    if exclude_id is not None:
        q = q.where(OrderStatus.id != exclude_id)
    res = await db.execute(q.limit(1))
    return res.scalar_one_or_none() is not None


async def unset_defaults(db: AsyncSession, exclude_id: Optional[int] = None) -> None:
    """Clear is_default on every row except exclude_id; the caller owns the transaction."""
    stmt = update(OrderStatus).where(OrderStatus.is_default == True)  # noqa: E712
    if exclude_id is not None:
        stmt = stmt.where(OrderStatus.id != exclude_id)
    await db.execute(stmt.values(is_default=False))


async def get_status(db: AsyncSession, status_id: int) -> OrderStatus:
    status = await db.get(OrderStatus, status_id)
    if not status:
        raise NotFoundError("Order status", str(status_id))
    return status


async def get_default_status(db: AsyncSession) -> OrderStatus | None:
    """The status new orders start in, if one has been designated."""
    res = await db.execute(
        select(OrderStatus).where(OrderStatus.is_default == True).limit(1)  # noqa: E712
    )
    return res.scalar_one_or_none()


async def list_statuses(db: AsyncSession, *, page: int = 1, per_page: int = 20) -> dict:
    """Page of statuses ordered by position, then name, with pagination meta."""
    page = max(page, 1)
    per_page = max(per_page, 1)

    total = (await db.execute(select(func.count()).select_from(OrderStatus))).scalar_one()
    res = await db.execute(
        select(OrderStatus)
        .order_by(OrderStatus.position.asc(), OrderStatus.name.asc())
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    return {
        "items": [serialize_status(s) for s in res.scalars().all()],
        "meta": page_meta(total, page, per_page),
    }


# ════════════════════════════════════════════════════════════════════
# Mutations
# ════════════════════════════════════════════════════════════════════


async def create_status(
    db: AsyncSession,
    *,
    name: str,
    color: str | None = None,
    is_default: bool = False,
    is_active: bool = True,
    position: int = 0,
) -> OrderStatus:
    """
    Create a status; if it is the new default, every other row loses the flag
    in the same transaction.

    Raises:
        ConflictError: the name is already used
        ValidationError: the name yields an empty slug
    """
    if await _name_taken(db, name):
        raise ConflictError(DUPLICATE_NAME_MESSAGE, details={"name": name})

    async def slug_taken(slug: str, exclude_id: Optional[int]) -> bool:
        return await _slug_taken(db, slug, exclude_id)

    # The unique indexes on name/slug catch a concurrent writer that passed the
    # same checks; the whole unit is retried against fresh state.
    for attempt in range(1, STATUS_WRITE_ATTEMPTS + 1):
        try:
            async with transaction(db):
                if is_default:
                    await unset_defaults(db)
                slug = await generate_unique_slug(name, None, slug_taken)
                status = OrderStatus(
                    name=name,
                    slug=slug,
                    color=color or settings.order_status_default_color,
                    is_default=bool(is_default),
                    is_active=is_active,
                    position=position or 0,
                )
                db.add(status)
                await db.flush()
        except IntegrityError as e:
            if await _name_taken(db, name):
                raise ConflictError(DUPLICATE_NAME_MESSAGE, details={"name": name}) from e
            if attempt == STATUS_WRITE_ATTEMPTS:
                raise ConflictError(
                    "Could not allocate a unique slug for this order status, please retry",
                    details={"name": name},
                ) from e
            logger.warning(f"Slug conflict creating order status '{name}' (attempt {attempt}), retrying")
            continue

        if status.is_default:
            logger.info(f"Order status {status.id} ('{status.slug}') is now the default")
        return status


async def update_status(
    db: AsyncSession,
    status_id: int,
    *,
    name: str | None = None,
    color: str | None = None,
    is_default: bool | None = None,
    is_active: bool | None = None,
    position: int | None = None,
) -> OrderStatus:
    """
    Update only the provided fields. The slug is regenerated only when the
    name actually changes.

    Raises:
        NotFoundError: no such status
        ConflictError: the new name belongs to another status, or the call
            would leave the table without a default
    """
    status = await get_status(db, status_id)

    name_changed = name is not None and name != status.name
    if name_changed and await _name_taken(db, name, exclude_id=status.id):
        raise ConflictError(DUPLICATE_NAME_MESSAGE, details={"name": name})
    if is_default is False and status.is_default:
        raise ConflictError(UNSET_DEFAULT_STATUS_MESSAGE)

    async def slug_taken(slug: str, exclude_id: Optional[int]) -> bool:
        return await _slug_taken(db, slug, exclude_id)

    try:
        async with transaction(db):
            if is_default:
                await unset_defaults(db, exclude_id=status.id)
            if name_changed:
                status.slug = await generate_unique_slug(name, status.id, slug_taken)
                status.name = name
            if color is not None:
                status.color = color
            if is_default is not None:
                status.is_default = is_default
            if is_active is not None:
                status.is_active = is_active
            if position is not None:
                status.position = position
            status.updated_at = datetime.utcnow()
            await db.flush()
    except IntegrityError as e:
        raise ConflictError(
            "Order status name or slug was taken concurrently, please retry",
            details={"id": str(status_id)},
        ) from e

    if is_default:
        logger.info(f"Order status {status.id} ('{status.slug}') is now the default")
    return status


async def remove_status(db: AsyncSession, status_id: int) -> None:
    """
    Delete a status. The default may only go when it is the last row.

    Raises:
        NotFoundError: no such status
        ConflictError: it is the default and other statuses exist
    """
    status = await get_status(db, status_id)

    if status.is_default:
        res = await db.execute(
            select(OrderStatus.id).where(OrderStatus.id != status.id).limit(1)
        )
        if res.scalar_one_or_none() is not None:
            raise ConflictError(DEFAULT_STATUS_MESSAGE)

    async with transaction(db):
        await db.delete(status)

    logger.info(f"Order status {status_id} removed")


async def bulk_destroy_statuses(db: AsyncSession, ids: Iterable[int]) -> int:
    """
    Delete every listed status in one statement, or none if the set holds the default.

    Returns:
        Number of rows deleted (unknown ids are ignored)
    """
    id_list = sorted({int(i) for i in ids})
    if not id_list:
        return 0

    res = await db.execute(
        select(OrderStatus.id)
        .where(OrderStatus.id.in_(id_list), OrderStatus.is_default == True)  # noqa: E712
        .limit(1)
    )
    if res.scalar_one_or_none() is not None:
        raise ConflictError(BULK_DEFAULT_STATUS_MESSAGE)

    async with transaction(db):
        result = await db.execute(
            delete(OrderStatus).where(OrderStatus.id.in_(id_list))
        )

    logger.info(f"Bulk-deleted {result.rowcount} order status(es)")
    return result.rowcount
