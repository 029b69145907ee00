"""Per-entity sync: pull records from Shopify and upsert them with bounded fan-out."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import UTC, datetime
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shopmetrics.core.config import settings
from shopmetrics.core.encryption import decrypt_token
from shopmetrics.core.errors import SyncFailure
from shopmetrics.integrations.shopify.client import ShopifyClient, ShopifyDataSource
from shopmetrics.models.store import Store
from shopmetrics.models.sync_log import SyncLog, SyncStatus, SyncType
from shopmetrics.schemas.shopify import CustomerPayload, OrderPayload, ProductPayload
from shopmetrics.services.ingest import ingest_customer, ingest_order, ingest_product
from shopmetrics.services.upsert_service import UpsertService

logger = logging.getLogger(__name__)

T = TypeVar("T")

ERROR_MESSAGE_LIMIT = 500


async def process_in_batches(
    items: Sequence[T],
    handler: Callable[[T, int], Awaitable[None]],
    concurrency: int = 10,
) -> None:
    """Run ``handler(item, index)`` over items, ``concurrency`` at a time.

    Items in one chunk run concurrently; the next chunk starts only after
    the whole chunk has finished. When an item fails, the rest of its chunk
    still runs to completion before the first failure is re-raised, and no
    further chunks are started.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")

    for start in range(0, len(items), concurrency):
        chunk = items[start : start + concurrency]
        outcomes = await asyncio.gather(
            *(handler(item, start + offset) for offset, item in enumerate(chunk)),
            return_exceptions=True,
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome


def shopify_source_for(store: Store) -> ShopifyDataSource:
    """Build an Admin API client from the store's encrypted token.

    Raises:
        SyncFailure: If the store has no usable access token.
    """
    if not store.shopify_access_token:
        raise SyncFailure(f"Store {store.id} has no Shopify access token")
    try:
        access_token = decrypt_token(store.shopify_access_token)
    except ValueError as e:
        raise SyncFailure(str(e)) from e
    return ShopifyClient(store.shopify_domain, access_token)


class ShopifySyncService:
    """Syncs customers, products or orders of one store.

    Every record is written in its own session so up to ``batch_size``
    upserts can run at once. Each run is recorded in a SyncLog row.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        source: ShopifyDataSource,
        *,
        batch_size: int | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.source = source
        self.batch_size = batch_size or settings.sync_batch_size

    async def sync_customers(self, store: Store) -> int:
        async def handle(raw: dict[str, Any]) -> None:
            payload = CustomerPayload.model_validate(raw)
            async with self.session_factory() as session:
                await ingest_customer(UpsertService(session), store, payload)

        return await self._run(store, SyncType.CUSTOMERS, self.source.get_all_customers, handle)

    async def sync_products(self, store: Store) -> int:
        async def handle(raw: dict[str, Any]) -> None:
            payload = ProductPayload.model_validate(raw)
            async with self.session_factory() as session:
                await ingest_product(UpsertService(session), store, payload)

        return await self._run(store, SyncType.PRODUCTS, self.source.get_all_products, handle)

    async def sync_orders(self, store: Store) -> int:
        async def handle(raw: dict[str, Any]) -> None:
            payload = OrderPayload.model_validate(raw)
            async with self.session_factory() as session:
                await ingest_order(UpsertService(session), store, payload)

        return await self._run(store, SyncType.ORDERS, self.source.get_all_orders, handle)

    async def _run(
        self,
        store: Store,
        sync_type: SyncType,
        fetch: Callable[[], Awaitable[list[dict[str, Any]]]],
        handle: Callable[[dict[str, Any]], Awaitable[None]],
    ) -> int:
        log_id = await self._start_log(store.id, sync_type)
        processed = 0

        async def count_handled(raw: dict[str, Any], _index: int) -> None:
            nonlocal processed
            await handle(raw)
            processed += 1

        try:
            records = await fetch()
            await process_in_batches(records, count_handled, self.batch_size)
        except Exception as e:
            logger.exception("%s sync failed for store %s", sync_type.value, store.id)
            await self._finish_log(
                log_id,
                SyncStatus.ERROR,
                records_processed=processed,
                error_message=str(e)[:ERROR_MESSAGE_LIMIT],
            )
            raise SyncFailure(f"Failed to sync {sync_type.value}: {e}") from e

        await self._finish_log(log_id, SyncStatus.SUCCESS, records_processed=processed)
        logger.info("Synced %d %s for store %s", processed, sync_type.value, store.id)
        return processed

    async def _start_log(self, store_id: UUID, sync_type: SyncType) -> UUID:
        async with self.session_factory() as session:
            log = SyncLog(
                store_id=store_id,
                sync_type=sync_type,
                status=SyncStatus.IN_PROGRESS,
                started_at=datetime.now(UTC),
            )
            session.add(log)
            await session.flush()
            log_id = log.id
            await session.commit()
        return log_id

    async def _finish_log(
        self,
        log_id: UUID,
        status: SyncStatus,
        *,
        records_processed: int,
        error_message: str | None = None,
    ) -> None:
        async with self.session_factory() as session:
            log = await session.get(SyncLog, log_id)
            if log is None:
                return
            log.status = status
            log.records_processed = records_processed
            log.error_message = error_message
            log.completed_at = datetime.now(UTC)
            await session.commit()
