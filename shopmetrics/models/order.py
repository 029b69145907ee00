"""Order model for synced Shopify orders."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Float, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopmetrics.models.base import Base

if TYPE_CHECKING:
    from shopmetrics.models.customer import Customer
    from shopmetrics.models.order_line_item import OrderLineItem
    from shopmetrics.models.store import Store


class Order(Base):
    """A store's order, unique per (store, shopify_order_id).

    ``order_date`` is the ISO-8601 string Shopify reports as ``created_at``.
    Analytics bucket on it by string slicing, so it is kept verbatim.
    """

    __tablename__ = "orders"

    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("stores.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    shopify_order_id: Mapped[str] = mapped_column(String(255), nullable=False)
    order_number: Mapped[str | None] = mapped_column(String(64), nullable=True)

    customer_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True,
    )
    customer_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    total_price: Mapped[float] = mapped_column(Float, nullable=False)
    subtotal_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_tax: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_discounts: Mapped[float | None] = mapped_column(Float, nullable=True)
    currency: Mapped[str] = mapped_column(String(10), nullable=False)

    # pending, authorized, partially_paid, paid, ...
    financial_status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # fulfilled, partial, restocked, ...
    fulfillment_status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    tags: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    order_date: Mapped[str] = mapped_column(String(64), nullable=False)
    shopify_created_at: Mapped[str | None] = mapped_column(String(64), nullable=True)
    shopify_updated_at: Mapped[str | None] = mapped_column(String(64), nullable=True)

    store: Mapped["Store"] = relationship("Store", back_populates="orders")
    customer: Mapped["Customer | None"] = relationship("Customer")
    line_items: Mapped[list["OrderLineItem"]] = relationship(
        "OrderLineItem",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index(
            "ix_orders_store_shopify_id",
            "store_id",
            "shopify_order_id",
            unique=True,
        ),
        Index("ix_orders_store_date", "store_id", "order_date"),
        Index("ix_orders_store_customer", "store_id", "customer_id"),
    )

    def __repr__(self) -> str:
        return f"<Order {self.order_number or self.shopify_order_id} {self.total_price}>"
