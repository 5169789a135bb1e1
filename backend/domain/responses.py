"""
Standard API response helpers for consistent response formatting.

All endpoints should use these helpers to ensure consistent response envelopes:
- Success: { "success": true, "data": <payload>, "meta": {...} }
- Error: { "success": false, "error": { "code": "...", "message": "...", "details": {...} } }
"""
import math
from typing import Any

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Standard error detail structure."""
    code: str = Field(..., description="Error code (e.g., 'notfound', 'conflict')")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | None = Field(default=None, description="Additional error context")


class PageMeta(BaseModel):
    """Page-number pagination metadata."""
    total: int = Field(..., description="Total number of items")
    page: int = Field(..., description="Current page (1-based)")
    per_page: int = Field(..., description="Number of items per page")
    total_pages: int = Field(..., description="Number of pages")


def success_response(data: Any, meta: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Create a standardized success response.

    Args:
        data: The response payload
        meta: Optional metadata (pagination, timestamps, etc.)

    Returns:
        dict: { "success": true, "data": <data>, "meta": <meta> }
    """
    response = {"success": True, "data": data}
    if meta:
        response["meta"] = meta
    return response


def page_meta(total: int, page: int, per_page: int) -> dict[str, int]:
    """Build {total, page, per_page, total_pages} for a page-numbered listing."""
    total_pages = math.ceil(total / per_page) if per_page else 0
    return PageMeta(total=total, page=page, per_page=per_page, total_pages=total_pages).model_dump()
