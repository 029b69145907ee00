"""Pydantic schemas for Shopify customer, product and order payloads.

The same models validate webhook bodies and records pulled by the sync
orchestrator. They coerce what Shopify sends loosely (numeric ids, money
as strings, comma-separated tags) and reject anything that cannot be
coerced.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _coerce_id(value: Any) -> Any:
    """Shopify ids arrive as ints in REST payloads and strings elsewhere."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    return value


def _split_tags(value: Any) -> Any:
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    return value


def _none_to_zero(value: Any) -> Any:
    return 0 if value is None else value


def _none_to_empty(value: Any) -> Any:
    return [] if value is None else value


ShopifyId = Annotated[str, BeforeValidator(_coerce_id)]
OptionalShopifyId = Annotated[str | None, BeforeValidator(_coerce_id)]
TagList = Annotated[list[str] | None, BeforeValidator(_split_tags)]
Money = Annotated[float, BeforeValidator(_none_to_zero)]
Count = Annotated[int, BeforeValidator(_none_to_zero)]


class ShopifyPayload(BaseModel):
    """Base for inbound Shopify payloads; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")


class CustomerPayload(ShopifyPayload):
    """customers/* topic body and Admin API customer record."""

    id: ShopifyId
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    total_spent: Money = 0.0
    orders_count: Count = 0
    state: str | None = None
    tags: TagList = None
    accepts_marketing: bool | None = None
    created_at: str | None = None
    updated_at: str | None = None


class VariantPayload(ShopifyPayload):
    id: OptionalShopifyId = None
    price: Money = 0.0
    compare_at_price: float | None = None
    inventory_quantity: int | None = None


class ProductPayload(ShopifyPayload):
    """products/* topic body and Admin API product record."""

    id: ShopifyId
    title: Annotated[str, BeforeValidator(lambda v: "Untitled" if v is None else v)] = "Untitled"
    handle: str | None = None
    product_type: str | None = None
    vendor: str | None = None
    status: str | None = None
    tags: TagList = None
    variants: Annotated[list[VariantPayload], BeforeValidator(_none_to_empty)] = Field(
        default_factory=list
    )
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def first_variant(self) -> VariantPayload | None:
        return self.variants[0] if self.variants else None


class LineItemPayload(ShopifyPayload):
    product_id: OptionalShopifyId = None
    variant_id: OptionalShopifyId = None
    title: Annotated[str, BeforeValidator(lambda v: "Item" if v is None else v)] = "Item"
    quantity: Annotated[int, BeforeValidator(lambda v: 1 if v is None else v)] = 1
    price: Money = 0.0
    total_discount: float | None = None
    sku: str | None = None


class OrderCustomerRef(ShopifyPayload):
    id: OptionalShopifyId = None
    email: str | None = None


class OrderPayload(ShopifyPayload):
    """orders/* topic body and Admin API order record."""

    id: ShopifyId
    order_number: OptionalShopifyId = None
    customer: OrderCustomerRef | None = None
    email: str | None = None
    total_price: Money = 0.0
    subtotal_price: float | None = None
    total_tax: float | None = None
    total_discounts: float | None = None
    currency: str | None = None
    financial_status: str | None = None
    fulfillment_status: str | None = None
    tags: TagList = None
    created_at: str | None = None
    updated_at: str | None = None
    line_items: Annotated[list[LineItemPayload], BeforeValidator(_none_to_empty)] = Field(
        default_factory=list
    )


class DeletePayload(ShopifyPayload):
    """*/delete topic body: only the id is guaranteed."""

    id: ShopifyId
