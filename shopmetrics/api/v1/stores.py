"""Store lookup, sync trigger and sync history endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, Request
from sqlalchemy import select

from shopmetrics.core.config import settings
from shopmetrics.core.deps import (
    CurrentUser,
    DBSession,
    RedisClient,
    SessionFactory,
    get_store_for_owner,
)
from shopmetrics.core.rate_limit import limiter
from shopmetrics.models.sync_log import SyncLog
from shopmetrics.schemas.store import FullSyncResponse, StoreResponse, SyncLogResponse
from shopmetrics.services.full_sync import FullSyncCoordinator

router = APIRouter()


@router.get(
    "/{store_id}",
    response_model=StoreResponse,
    summary="Get store",
    description="Get a store owned by the authenticated user.",
)
async def get_store(
    store_id: UUID,
    user: CurrentUser,
    db: DBSession,
) -> StoreResponse:
    store = await get_store_for_owner(store_id, user, db)
    return StoreResponse.model_validate(store)


@router.post(
    "/{store_id}/sync",
    response_model=FullSyncResponse,
    summary="Sync store",
    description="Pull all customers, products and orders from Shopify.",
)
@limiter.limit(settings.sync_rate_limit)
async def sync_store(
    request: Request,  # noqa: ARG001 (used by slowapi)
    store_id: UUID,
    user: CurrentUser,
    db: DBSession,
    session_factory: SessionFactory,
    redis: RedisClient,
) -> FullSyncResponse:
    """Run a full sync and return per-entity counts.

    Returns 409 if a sync for the store is already running and 502 if any
    entity sync fails. Records written before a failure are kept.
    """
    await get_store_for_owner(store_id, user, db)
    coordinator = FullSyncCoordinator(session_factory, redis)
    return await coordinator.run(store_id)


@router.get(
    "/{store_id}/sync-logs",
    response_model=list[SyncLogResponse],
    summary="List sync logs",
    description="Most recent entity sync runs, newest first.",
)
async def list_sync_logs(
    store_id: UUID,
    user: CurrentUser,
    db: DBSession,
    limit: int = Query(20, ge=1, le=100),
) -> list[SyncLogResponse]:
    await get_store_for_owner(store_id, user, db)

    stmt = (
        select(SyncLog)
        .where(SyncLog.store_id == store_id)
        .order_by(SyncLog.started_at.desc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return [SyncLogResponse.model_validate(log) for log in result.scalars().all()]
