"""Store model: one tenant's connected Shopify shop."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopmetrics.models.base import Base

if TYPE_CHECKING:
    from shopmetrics.models.customer import Customer
    from shopmetrics.models.order import Order
    from shopmetrics.models.product import Product
    from shopmetrics.models.sync_log import SyncLog


class Store(Base):
    """A Shopify store owned by a single principal.

    All customers, products, orders and sync logs are scoped to a store.
    ``owner_id`` holds the ``sub`` claim of the owning user's JWT.
    """

    __tablename__ = "stores"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # e.g. "mystore.myshopify.com"; stored lower-case
    shopify_domain: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # Fernet-encrypted Admin API token
    shopify_access_token: Mapped[str | None] = mapped_column(Text, nullable=True)

    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    currency: Mapped[str] = mapped_column(String(10), default="USD", nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), default="UTC", nullable=False)

    last_sync_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    customers: Mapped[list["Customer"]] = relationship(
        "Customer",
        back_populates="store",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    products: Mapped[list["Product"]] = relationship(
        "Product",
        back_populates="store",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    orders: Mapped[list["Order"]] = relationship(
        "Order",
        back_populates="store",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    sync_logs: Mapped[list["SyncLog"]] = relationship(
        "SyncLog",
        back_populates="store",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Store {self.name} ({self.shopify_domain})>"
