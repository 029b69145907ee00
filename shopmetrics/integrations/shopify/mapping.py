"""Map validated Shopify payloads to column values for the upsert layer.

Every mapper returns the complete mutable attribute set for its model:
upserts replace fields wholesale, so a missing key would reset a column.
"""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from shopmetrics.schemas.shopify import (
    CustomerPayload,
    LineItemPayload,
    OrderPayload,
    ProductPayload,
)


def map_customer(store_id: UUID, data: CustomerPayload) -> dict[str, Any]:
    """Customer payload -> Customer columns."""
    return {
        "store_id": store_id,
        "shopify_customer_id": data.id,
        "email": data.email,
        "first_name": data.first_name,
        "last_name": data.last_name,
        "phone": data.phone,
        "total_spent": data.total_spent,
        "orders_count": data.orders_count,
        "state": data.state,
        "tags": data.tags,
        "accepts_marketing": data.accepts_marketing,
        "shopify_created_at": data.created_at,
        "shopify_updated_at": data.updated_at,
    }


def map_product(store_id: UUID, data: ProductPayload) -> dict[str, Any]:
    """Product payload -> Product columns, pricing taken from the first variant."""
    variant = data.first_variant
    return {
        "store_id": store_id,
        "shopify_product_id": data.id,
        "title": data.title,
        "handle": data.handle,
        "product_type": data.product_type,
        "vendor": data.vendor,
        "status": data.status,
        "tags": data.tags,
        "price": variant.price if variant else None,
        "compare_at_price": variant.compare_at_price if variant else None,
        "inventory_quantity": variant.inventory_quantity if variant else None,
        "shopify_created_at": data.created_at,
        "shopify_updated_at": data.updated_at,
    }


def map_order(
    store_id: UUID,
    data: OrderPayload,
    *,
    customer_id: UUID | None,
    default_currency: str,
) -> dict[str, Any]:
    """Order payload -> Order columns.

    Orders without ``created_at`` are dated now, and orders without a
    currency take the store's currency.
    """
    return {
        "store_id": store_id,
        "shopify_order_id": data.id,
        "order_number": data.order_number,
        "customer_id": customer_id,
        "customer_email": data.email,
        "total_price": data.total_price,
        "subtotal_price": data.subtotal_price,
        "total_tax": data.total_tax,
        "total_discounts": data.total_discounts,
        "currency": data.currency or default_currency,
        "financial_status": data.financial_status,
        "fulfillment_status": data.fulfillment_status,
        "tags": data.tags,
        "order_date": data.created_at or datetime.now(UTC).isoformat(),
        "shopify_created_at": data.created_at,
        "shopify_updated_at": data.updated_at,
    }


def map_line_item(store_id: UUID, order_id: UUID, data: LineItemPayload) -> dict[str, Any]:
    """Line item payload -> OrderLineItem columns."""
    return {
        "store_id": store_id,
        "order_id": order_id,
        "shopify_product_id": data.product_id,
        "shopify_variant_id": data.variant_id,
        "title": data.title,
        "quantity": data.quantity,
        "price": data.price,
        "total_discount": data.total_discount,
        "sku": data.sku,
    }
