"""
Order status admin endpoints — list, create, update, delete, bulk delete.

All invariant enforcement lives in services.order_status_service; these handlers
only validate input and shape responses.
"""

import logging
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from deps import Pagination, pagination_params
from domain.responses import success_response
from services import order_status_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin/order-statuses", tags=["order-statuses"])

HEX_COLOR = r"^#(?:[0-9a-fA-F]{3}){1,2}$"


class OrderStatusCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: str | None = Field(default=None, pattern=HEX_COLOR)
    is_default: bool = False
    is_active: bool = True
    position: int = Field(0, ge=0, le=10_000)


class OrderStatusUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = Field(default=None, pattern=HEX_COLOR)
    is_default: bool | None = None
    is_active: bool | None = None
    position: int | None = Field(default=None, ge=0, le=10_000)


class BulkDestroyRequest(BaseModel):
    ids: list[int] = Field(..., min_length=1, max_length=500)


@router.get("")
async def list_order_statuses(
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db),
):
    result = await order_status_service.list_statuses(
        db, page=pagination["page"], per_page=pagination["per_page"]
    )
    return success_response(data=result["items"], meta=result["meta"])


@router.post("", status_code=201)
async def create_order_status(
    request: OrderStatusCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    status = await order_status_service.create_status(
        db,
        name=request.name.strip(),
        color=request.color,
        is_default=request.is_default,
        is_active=request.is_active,
        position=request.position,
    )
    return success_response(data=order_status_service.serialize_status(status))


@router.patch("/{status_id}")
async def update_order_status(
    status_id: int,
    request: OrderStatusUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    fields = request.model_dump(exclude_unset=True)
    if fields.get("name") is not None:
        fields["name"] = fields["name"].strip()
    status = await order_status_service.update_status(db, status_id, **fields)
    return success_response(data=order_status_service.serialize_status(status))


@router.delete("/{status_id}")
async def delete_order_status(
    status_id: int,
    db: AsyncSession = Depends(get_db),
):
    await order_status_service.remove_status(db, status_id)
    return success_response(data={"message": "Order status removed successfully"})


@router.post("/bulk-delete")
async def bulk_delete_order_statuses(
    request: BulkDestroyRequest,
    db: AsyncSession = Depends(get_db),
):
    deleted = await order_status_service.bulk_destroy_statuses(db, request.ids)
    return success_response(
        data={"message": "Selected order statuses deleted successfully"},
        meta={"deleted": deleted},
    )
