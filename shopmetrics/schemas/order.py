"""Pydantic schemas for orders and their line items."""

from datetime import datetime
from uuid import UUID

from shopmetrics.schemas.common import BaseSchema


class OrderLineItemResponse(BaseSchema):
    """A single line of an order."""

    id: UUID
    order_id: UUID
    product_id: UUID | None
    shopify_product_id: str | None
    shopify_variant_id: str | None
    title: str
    quantity: int
    price: float
    total_discount: float | None
    sku: str | None


class OrderResponse(BaseSchema):
    """An order without its line items."""

    id: UUID
    store_id: UUID
    shopify_order_id: str
    order_number: str | None
    customer_id: UUID | None
    customer_email: str | None
    total_price: float
    subtotal_price: float | None
    total_tax: float | None
    total_discounts: float | None
    currency: str
    financial_status: str | None
    fulfillment_status: str | None
    tags: list[str] | None
    order_date: str
    created_at: datetime
