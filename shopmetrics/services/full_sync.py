"""Full sync: customers, products and orders of one store, concurrently."""

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

import redis.asyncio as aioredis
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shopmetrics.core.errors import NotFoundError, SyncFailure
from shopmetrics.core.logging_config import store_log_context
from shopmetrics.integrations.shopify.client import ShopifyDataSource
from shopmetrics.models.store import Store
from shopmetrics.schemas.store import FullSyncResponse, SyncCounts
from shopmetrics.services.sync_lock import StoreSyncLock
from shopmetrics.services.sync_service import ShopifySyncService, shopify_source_for

logger = logging.getLogger(__name__)

SourceFactory = Callable[[Store], ShopifyDataSource]


class FullSyncCoordinator:
    """Runs the three entity syncs for a store and stamps ``last_sync_at``.

    The sync is at-least-once and not transactional across entities: if
    one leg fails, rows written by the others stay, the error is raised,
    and ``last_sync_at`` keeps its previous value. All legs are allowed to
    settle before the error is raised so no writes outlive the sync lease.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        redis: aioredis.Redis,
        *,
        source_factory: SourceFactory = shopify_source_for,
        batch_size: int | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.lock = StoreSyncLock(redis)
        self.source_factory = source_factory
        self.batch_size = batch_size

    async def run(self, store_id: UUID) -> FullSyncResponse:
        """Sync one store.

        Raises:
            NotFoundError: If the store does not exist.
            SyncInProgressError: If the store is already syncing.
            SyncFailure: If any entity sync fails.
        """
        async with self.session_factory() as session:
            store = await session.get(Store, store_id)
        if store is None:
            raise NotFoundError(f"Store {store_id} not found")

        with store_log_context(store_id):
            async with self.lock.hold(store_id):
                return await self._sync(store)

    async def _sync(self, store: Store) -> FullSyncResponse:
        syncer = ShopifySyncService(
            self.session_factory,
            self.source_factory(store),
            batch_size=self.batch_size,
        )

        logger.info("Starting full sync for store %s", store.id)
        products, customers, orders = await asyncio.gather(
            syncer.sync_products(store),
            syncer.sync_customers(store),
            syncer.sync_orders(store),
            return_exceptions=True,
        )

        counts: list[int] = []
        for outcome in (products, customers, orders):
            if isinstance(outcome, BaseException):
                logger.error("Full sync failed for store %s: %s", store.id, outcome)
                raise SyncFailure(f"Full sync failed: {outcome}") from outcome
            counts.append(outcome)
        synced = SyncCounts(products=counts[0], customers=counts[1], orders=counts[2])

        await self._touch_last_sync(store.id)

        logger.info(
            "Full sync finished for store %s: %d products, %d customers, %d orders",
            store.id,
            synced.products,
            synced.customers,
            synced.orders,
        )
        return FullSyncResponse(success=True, results=synced)

    async def _touch_last_sync(self, store_id: UUID) -> None:
        async with self.session_factory() as session:
            store = await session.get(Store, store_id)
            if store is not None:
                store.last_sync_at = datetime.now(UTC)
                await session.commit()


async def list_active_store_ids(session_factory: async_sessionmaker[AsyncSession]) -> list[UUID]:
    """Ids of every active store, oldest first."""
    async with session_factory() as session:
        stmt = select(Store.id).where(Store.is_active.is_(True)).order_by(Store.created_at)
        result = await session.execute(stmt)
        return list(result.scalars().all())
