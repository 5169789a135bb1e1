"""
Shared FastAPI dependencies.

Centralized here so routers import from a single place (DB session, gateway
manager, pagination).
"""

from __future__ import annotations

from typing import TypedDict

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from services.payment_gateway_manager import PaymentGatewayManager


class Pagination(TypedDict):
    page: int
    per_page: int


def pagination_params(
    page: int = Query(1, ge=1, le=100_000),
    per_page: int = Query(settings.order_status_page_size, ge=1, le=200),
) -> Pagination:
    return {"page": page, "per_page": per_page}


def get_gateway_manager(db: AsyncSession = Depends(get_db)) -> PaymentGatewayManager:
    """A fresh manager per request; it re-reads gateway rows on every call."""
    return PaymentGatewayManager(db, settings)
