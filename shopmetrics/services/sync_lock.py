"""Per-store sync lease held in Redis.

A store is either idle (no key) or syncing (key present). The key expires
after ``sync_lock_ttl_seconds`` so a crashed worker cannot wedge a store.
"""

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

import redis.asyncio as aioredis
from redis.exceptions import WatchError

from shopmetrics.core.config import settings
from shopmetrics.core.errors import SyncInProgressError

logger = logging.getLogger(__name__)


def _lock_key(store_id: UUID) -> str:
    return f"sync:lock:{store_id}"


class StoreSyncLock:
    """Acquire/release the sync lease of one store."""

    def __init__(self, redis: aioredis.Redis, ttl_seconds: int | None = None) -> None:
        self.redis = redis
        self.ttl_seconds = ttl_seconds or settings.sync_lock_ttl_seconds

    async def acquire(self, store_id: UUID) -> str | None:
        """Take the lease. Returns its token, or None if another sync holds it."""
        token = uuid.uuid4().hex
        acquired = await self.redis.set(_lock_key(store_id), token, nx=True, ex=self.ttl_seconds)
        return token if acquired else None

    async def release(self, store_id: UUID, token: str) -> bool:
        """Drop the lease if ``token`` still owns it."""
        key = _lock_key(store_id)
        async with self.redis.pipeline(transaction=True) as pipe:
            try:
                await pipe.watch(key)
                current = await pipe.get(key)
                if isinstance(current, bytes):
                    current = current.decode()
                if current != token:
                    await pipe.unwatch()
                    return False
                pipe.multi()
                pipe.delete(key)
                await pipe.execute()
            except WatchError:
                return False
        return True

    async def is_locked(self, store_id: UUID) -> bool:
        return bool(await self.redis.exists(_lock_key(store_id)))

    @asynccontextmanager
    async def hold(self, store_id: UUID) -> AsyncIterator[str]:
        """Hold the lease for the duration of the block.

        Raises:
            SyncInProgressError: If the store is already syncing.
        """
        token = await self.acquire(store_id)
        if token is None:
            raise SyncInProgressError(f"A sync is already running for store {store_id}")
        try:
            yield token
        finally:
            if not await self.release(store_id, token):
                logger.warning("Sync lease for store %s expired before release", store_id)
