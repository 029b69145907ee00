"""Celery tasks for scheduled and on-demand store syncs."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from shopmetrics.core.config import settings
from shopmetrics.services.full_sync import FullSyncCoordinator, list_active_store_ids
from shopmetrics.services.scheduled_sync import ScheduledSyncRunner
from shopmetrics.workers.celery_app import BaseTask, celery_app


TaskResources = tuple[async_sessionmaker[AsyncSession], aioredis.Redis]


@asynccontextmanager
async def _task_resources() -> AsyncIterator[TaskResources]:
    """Engine and Redis client bound to the task's own event loop."""
    engine = create_async_engine(str(settings.database_url), poolclass=NullPool)
    redis = aioredis.from_url(str(settings.redis_url), decode_responses=True)
    try:
        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False), redis
    finally:
        await redis.aclose()
        await engine.dispose()


def _run(coro: Any) -> Any:
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@celery_app.task(
    name="tasks.sync.full_sync_store",
    base=BaseTask,
    bind=True,
)
def full_sync_store(self: BaseTask, store_id: str) -> dict[str, Any]:  # noqa: ARG001
    """Full sync of one store."""
    return _run(_full_sync_store_async(UUID(store_id)))  # type: ignore[no-any-return]


async def _full_sync_store_async(store_id: UUID) -> dict[str, Any]:
    async with _task_resources() as (session_factory, redis):
        coordinator = FullSyncCoordinator(session_factory, redis)
        result = await coordinator.run(store_id)
    return {"store_id": str(store_id), **result.model_dump()}


@celery_app.task(
    name="tasks.sync.sync_active_stores",
    base=BaseTask,
    bind=True,
)
def sync_active_stores(self: BaseTask) -> dict[str, Any]:  # noqa: ARG001
    """Periodic task: full sync of every active store, one at a time."""
    return _run(_sync_active_stores_async())  # type: ignore[no-any-return]


async def _sync_active_stores_async() -> dict[str, Any]:
    async with _task_resources() as (session_factory, redis):
        coordinator = FullSyncCoordinator(session_factory, redis)
        runner = ScheduledSyncRunner(
            lambda: list_active_store_ids(session_factory),
            coordinator.run,
        )
        report = await runner.run_once()
    return report.as_dict()
