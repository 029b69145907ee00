"""Dependency injection for FastAPI routes."""

from collections.abc import AsyncGenerator
from typing import Annotated, Any
from uuid import UUID

import redis.asyncio as aioredis
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shopmetrics.core.auth import CurrentUser, get_current_user
from shopmetrics.core.config import settings
from shopmetrics.core.database import async_session_maker, get_async_session
from shopmetrics.core.errors import AuthorizationError
from shopmetrics.models.store import Store


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a request-scoped database session."""
    async for session in get_async_session():
        yield session


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory for operations that open one session per unit of work."""
    return async_session_maker


_redis_pool: aioredis.ConnectionPool | None = None


def _get_redis_pool() -> aioredis.ConnectionPool:
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is None:
        _redis_pool = aioredis.ConnectionPool.from_url(
            str(settings.redis_url), decode_responses=True
        )
    return _redis_pool


async def get_redis() -> AsyncGenerator[aioredis.Redis, None]:
    """Yield a Redis client from the shared connection pool."""
    r = aioredis.Redis(connection_pool=_get_redis_pool())
    try:
        yield r
    finally:
        await r.aclose()


DBSession = Annotated[AsyncSession, Depends(get_db)]
SessionFactory = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]
RedisClient = Annotated[aioredis.Redis, Depends(get_redis)]


def get_user_id(user: dict[str, Any]) -> str:
    """Extract the principal identifier from a verified JWT payload."""
    return str(user["sub"])


async def get_store_for_owner(store_id: UUID, user: dict[str, Any], db: AsyncSession) -> Store:
    """Load a store, verifying the caller owns it.

    Raises:
        AuthorizationError: If the store does not exist or belongs to
            another principal. Both cases look identical to the caller.
    """
    store = await db.get(Store, store_id)
    if store is None or store.owner_id != get_user_id(user):
        raise AuthorizationError()
    return store


__all__ = [
    "CurrentUser",
    "DBSession",
    "RedisClient",
    "SessionFactory",
    "get_current_user",
    "get_db",
    "get_redis",
    "get_session_factory",
    "get_store_for_owner",
    "get_user_id",
]
