"""Order line item model."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Float, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopmetrics.models.base import Base

if TYPE_CHECKING:
    from shopmetrics.models.order import Order


class OrderLineItem(Base):
    """A line of an order.

    Line items are matched on (order_id, shopify_product_id) when upserted,
    so two variants of one product in the same order share a row.
    """

    __tablename__ = "order_line_items"

    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("stores.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
    )
    shopify_product_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    shopify_variant_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    total_discount: Mapped[float | None] = mapped_column(Float, nullable=True)
    sku: Mapped[str | None] = mapped_column(String(255), nullable=True)

    order: Mapped["Order"] = relationship("Order", back_populates="line_items")

    __table_args__ = (Index("ix_order_line_items_store_product", "store_id", "product_id"),)

    def __repr__(self) -> str:
        return f"<OrderLineItem {self.title} x{self.quantity}>"
