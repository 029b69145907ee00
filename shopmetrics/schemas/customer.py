"""Pydantic schemas for synced customers."""

from datetime import datetime
from uuid import UUID

from shopmetrics.schemas.common import BaseSchema


class CustomerResponse(BaseSchema):
    """A customer as last synced from Shopify."""

    id: UUID
    store_id: UUID
    shopify_customer_id: str
    email: str | None
    first_name: str | None
    last_name: str | None
    phone: str | None
    total_spent: float
    orders_count: int
    state: str | None
    tags: list[str] | None
    accepts_marketing: bool | None
    shopify_created_at: str | None
    created_at: datetime
