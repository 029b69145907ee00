"""Sync log model: audit record for one entity sync run."""

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopmetrics.models.base import Base

if TYPE_CHECKING:
    from shopmetrics.models.store import Store


class SyncType(str, enum.Enum):
    """Entity synced by a run."""

    CUSTOMERS = "customers"
    PRODUCTS = "products"
    ORDERS = "orders"


class SyncStatus(str, enum.Enum):
    """Lifecycle of a sync run."""

    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    ERROR = "error"


class SyncLog(Base):
    """One sync invocation for one entity type of one store."""

    __tablename__ = "sync_logs"

    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("stores.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sync_type: Mapped[SyncType] = mapped_column(
        Enum(SyncType, name="sync_type", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    status: Mapped[SyncStatus] = mapped_column(
        Enum(SyncStatus, name="sync_status", values_callable=lambda x: [e.value for e in x]),
        default=SyncStatus.IN_PROGRESS,
        nullable=False,
        index=True,
    )
    records_processed: Mapped[int | None] = mapped_column(Integer, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    store: Mapped["Store"] = relationship("Store", back_populates="sync_logs")

    __table_args__ = (Index("ix_sync_logs_store_type", "store_id", "sync_type"),)

    def __repr__(self) -> str:
        return f"<SyncLog {self.sync_type.value}:{self.status.value}>"
