"""Pydantic schemas for synced products."""

from datetime import datetime
from uuid import UUID

from shopmetrics.schemas.common import BaseSchema


class ProductResponse(BaseSchema):
    id: UUID
    store_id: UUID
    shopify_product_id: str
    title: str
    handle: str | None
    product_type: str | None
    vendor: str | None
    status: str | None
    tags: list[str] | None
    price: float | None
    compare_at_price: float | None
    inventory_quantity: int | None
    created_at: datetime
