"""Product model for synced Shopify products."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Float, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopmetrics.models.base import Base

if TYPE_CHECKING:
    from shopmetrics.models.store import Store


class Product(Base):
    """Product synced from Shopify.

    Price, compare-at price and inventory come from the product's first
    variant. The shopify_product_id is unique within a store.
    """

    __tablename__ = "products"

    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("stores.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    shopify_product_id: Mapped[str] = mapped_column(String(255), nullable=False)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    handle: Mapped[str | None] = mapped_column(String(255), nullable=True)
    product_type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    vendor: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # active, archived, draft
    status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    tags: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    price: Mapped[float | None] = mapped_column(Float, nullable=True)
    compare_at_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    inventory_quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)

    shopify_created_at: Mapped[str | None] = mapped_column(String(64), nullable=True)
    shopify_updated_at: Mapped[str | None] = mapped_column(String(64), nullable=True)

    store: Mapped["Store"] = relationship("Store", back_populates="products")

    __table_args__ = (
        Index(
            "ix_products_store_shopify_id",
            "store_id",
            "shopify_product_id",
            unique=True,
        ),
    )

    def __repr__(self) -> str:
        return f"<Product {self.title} ({self.shopify_product_id})>"
