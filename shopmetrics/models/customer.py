"""Customer model synced from Shopify."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, Float, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopmetrics.models.base import Base

if TYPE_CHECKING:
    from shopmetrics.models.store import Store


class Customer(Base):
    """A store's customer, unique per (store, shopify_customer_id)."""

    __tablename__ = "customers"

    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("stores.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    shopify_customer_id: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    total_spent: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    orders_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # enabled, disabled, invited, declined
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    tags: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    accepts_marketing: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    shopify_created_at: Mapped[str | None] = mapped_column(String(64), nullable=True)
    shopify_updated_at: Mapped[str | None] = mapped_column(String(64), nullable=True)

    store: Mapped["Store"] = relationship("Store", back_populates="customers")

    __table_args__ = (
        Index(
            "ix_customers_store_shopify_id",
            "store_id",
            "shopify_customer_id",
            unique=True,
        ),
        Index("ix_customers_store_email", "store_id", "email"),
    )

    @property
    def display_name(self) -> str:
        """Full name, falling back to email, then 'Unknown'."""
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or self.email or "Unknown"

    def __repr__(self) -> str:
        return f"<Customer {self.shopify_customer_id} ({self.email})>"
