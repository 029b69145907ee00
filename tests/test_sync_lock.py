"""Tests for the per-store sync lease."""

import uuid

import fakeredis.aioredis
import pytest

from shopmetrics.core.errors import SyncInProgressError
from shopmetrics.services.sync_lock import StoreSyncLock


class TestStoreSyncLock:
    @pytest.mark.asyncio
    async def test_acquire_is_exclusive(self, fake_redis: fakeredis.aioredis.FakeRedis) -> None:
        lock = StoreSyncLock(fake_redis)
        store_id = uuid.uuid4()

        token = await lock.acquire(store_id)

        assert token is not None
        assert await lock.acquire(store_id) is None
        assert await lock.is_locked(store_id)

    @pytest.mark.asyncio
    async def test_stores_are_independent(self, fake_redis: fakeredis.aioredis.FakeRedis) -> None:
        lock = StoreSyncLock(fake_redis)

        assert await lock.acquire(uuid.uuid4()) is not None
        assert await lock.acquire(uuid.uuid4()) is not None

    @pytest.mark.asyncio
    async def test_release_requires_owning_token(
        self, fake_redis: fakeredis.aioredis.FakeRedis
    ) -> None:
        lock = StoreSyncLock(fake_redis)
        store_id = uuid.uuid4()
        token = await lock.acquire(store_id)
        assert token is not None

        assert await lock.release(store_id, "someone-else") is False
        assert await lock.is_locked(store_id)
        assert await lock.release(store_id, token) is True
        assert not await lock.is_locked(store_id)

    @pytest.mark.asyncio
    async def test_lease_expires(self, fake_redis: fakeredis.aioredis.FakeRedis) -> None:
        lock = StoreSyncLock(fake_redis, ttl_seconds=60)
        store_id = uuid.uuid4()
        await lock.acquire(store_id)

        ttl = await fake_redis.ttl(f"sync:lock:{store_id}")

        assert 0 < ttl <= 60

    @pytest.mark.asyncio
    async def test_hold_releases_on_error(self, fake_redis: fakeredis.aioredis.FakeRedis) -> None:
        lock = StoreSyncLock(fake_redis)
        store_id = uuid.uuid4()

        with pytest.raises(RuntimeError):
            async with lock.hold(store_id):
                assert await lock.is_locked(store_id)
                raise RuntimeError("sync crashed")

        assert not await lock.is_locked(store_id)

    @pytest.mark.asyncio
    async def test_hold_rejects_when_busy(self, fake_redis: fakeredis.aioredis.FakeRedis) -> None:
        lock = StoreSyncLock(fake_redis)
        store_id = uuid.uuid4()

        async with lock.hold(store_id):
            with pytest.raises(SyncInProgressError):
                async with lock.hold(store_id):
                    pass

        assert not await lock.is_locked(store_id)
