"""Pydantic schemas for stores, sync runs and sync logs."""

from datetime import datetime
from uuid import UUID

from shopmetrics.models.sync_log import SyncStatus, SyncType
from shopmetrics.schemas.common import BaseSchema


class StoreResponse(BaseSchema):
    """A store as seen by its owner. The access token is never returned."""

    id: UUID
    name: str
    shopify_domain: str
    owner_id: str
    is_active: bool
    currency: str
    timezone: str
    last_sync_at: datetime | None
    created_at: datetime
    updated_at: datetime


class SyncCounts(BaseSchema):
    """Records processed per entity in a full sync."""

    products: int
    customers: int
    orders: int


class FullSyncResponse(BaseSchema):
    """Result of a completed full sync."""

    success: bool
    results: SyncCounts


class SyncLogResponse(BaseSchema):
    """One entity sync run."""

    id: UUID
    store_id: UUID
    sync_type: SyncType
    status: SyncStatus
    records_processed: int | None
    error_message: str | None
    started_at: datetime
    completed_at: datetime | None
