"""Pytest configuration and fixtures for the ShopMetrics API test suite.

Provides:
- A throwaway SQLite database per test (aiosqlite, tables created from metadata)
- Mock authentication (JWT bypass)
- Mock Redis (fakeredis)
- Disabled rate limiting
- Model factory fixtures for Store, Customer, Product, Order, OrderLineItem
  and SyncLog
- Shopify webhook signing helpers and an in-memory Shopify data source
"""

import base64
import hashlib
import hmac
import uuid
from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import UUID

import fakeredis.aioredis
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from shopmetrics.core.auth import get_current_user
from shopmetrics.core.deps import get_db, get_redis, get_session_factory
from shopmetrics.core.encryption import encrypt_token
from shopmetrics.core.rate_limit import limiter
from shopmetrics.main import app
from shopmetrics.models.base import Base
from shopmetrics.models.customer import Customer
from shopmetrics.models.order import Order
from shopmetrics.models.order_line_item import OrderLineItem
from shopmetrics.models.product import Product
from shopmetrics.models.store import Store
from shopmetrics.models.sync_log import SyncLog, SyncStatus, SyncType

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
TEST_USER_ID = "test-user-id"
TEST_USER_EMAIL = "test@example.com"
OTHER_USER_ID = "other-user-id"

SHOPIFY_TEST_CLIENT_SECRET = "test-shopify-client-secret"
SHOPIFY_TEST_SHOP = "test-store.myshopify.com"
SHOPIFY_TEST_ACCESS_TOKEN = "shpat_test_access_token_123"

# ---------------------------------------------------------------------------
# Disable rate limiting globally for tests
# ---------------------------------------------------------------------------
limiter.enabled = False


# ---------------------------------------------------------------------------
# Per-test database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def session_factory(
    tmp_path: Path,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory bound to a fresh SQLite file for this test.

    A file (not ``:memory:``) so that concurrent sessions opened by the sync
    orchestrator see each other's commits. NullPool gives every session its
    own connection; the busy timeout serialises concurrent writers.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for test setup (factory fixtures)."""
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Fake Redis
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_redis() -> fakeredis.aioredis.FakeRedis:
    """Provide a fresh fakeredis instance per test."""
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


# ---------------------------------------------------------------------------
# Auth mock
# ---------------------------------------------------------------------------


@pytest.fixture
def auth_user() -> dict[str, Any]:
    """Return the default authenticated test user payload (mimics decoded JWT)."""
    return {
        "sub": TEST_USER_ID,
        "email": TEST_USER_EMAIL,
    }


def _override_infrastructure(
    session_factory: async_sessionmaker[AsyncSession],
    fake_redis: fakeredis.aioredis.FakeRedis,
) -> None:
    async def _override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as s:
            yield s

    async def _override_redis() -> AsyncGenerator[fakeredis.aioredis.FakeRedis, None]:
        yield fake_redis

    app.dependency_overrides[get_db] = _override_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_redis] = _override_redis


# ---------------------------------------------------------------------------
# Authenticated client (overrides DB, Redis, Auth)
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    fake_redis: fakeredis.aioredis.FakeRedis,
    auth_user: dict[str, Any],
) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated async test client with all dependencies overridden."""

    async def _override_user() -> dict[str, Any]:
        return auth_user

    _override_infrastructure(session_factory, fake_redis)
    app.dependency_overrides[get_current_user] = _override_user

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Unauthenticated client (overrides DB & Redis only, no auth bypass)
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def unauthed_client(
    session_factory: async_sessionmaker[AsyncSession],
    fake_redis: fakeredis.aioredis.FakeRedis,
) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated async test client. Auth is NOT overridden."""
    _override_infrastructure(session_factory, fake_redis)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Lightweight client (no DB, no auth, for stateless endpoint tests)
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def plain_client() -> AsyncGenerator[AsyncClient, None]:
    """Minimal async test client with NO dependency overrides."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ---------------------------------------------------------------------------
# Model Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def store_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates Store instances in the test database."""

    async def _create(
        *,
        name: str = "Test Store",
        shopify_domain: str = SHOPIFY_TEST_SHOP,
        owner_id: str = TEST_USER_ID,
        access_token: str | None = SHOPIFY_TEST_ACCESS_TOKEN,
        is_active: bool = True,
        currency: str = "USD",
    ) -> Store:
        store = Store(
            name=name,
            shopify_domain=shopify_domain,
            owner_id=owner_id,
            shopify_access_token=encrypt_token(access_token) if access_token else None,
            is_active=is_active,
            currency=currency,
        )
        db_session.add(store)
        await db_session.commit()
        await db_session.refresh(store)
        return store

    return _create


@pytest_asyncio.fixture
async def store(store_factory: Callable[..., Any]) -> Store:
    """A store owned by the default test user."""
    return await store_factory()


@pytest_asyncio.fixture
async def other_store(store_factory: Callable[..., Any]) -> Store:
    """A store owned by somebody else."""
    return await store_factory(
        name="Other Store",
        shopify_domain="other-store.myshopify.com",
        owner_id=OTHER_USER_ID,
    )


@pytest.fixture
def customer_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates Customer instances."""

    async def _create(
        *,
        store_id: UUID,
        shopify_customer_id: str | None = None,
        email: str | None = "customer@example.com",
        first_name: str | None = "Jane",
        last_name: str | None = "Doe",
        total_spent: float = 0.0,
        orders_count: int = 0,
    ) -> Customer:
        customer = Customer(
            store_id=store_id,
            shopify_customer_id=shopify_customer_id or str(uuid.uuid4().int)[:12],
            email=email,
            first_name=first_name,
            last_name=last_name,
            total_spent=total_spent,
            orders_count=orders_count,
        )
        db_session.add(customer)
        await db_session.commit()
        await db_session.refresh(customer)
        return customer

    return _create


@pytest.fixture
def product_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates Product instances."""

    async def _create(
        *,
        store_id: UUID,
        title: str = "Test Product",
        shopify_product_id: str | None = None,
        status: str | None = "active",
        price: float | None = 19.99,
        inventory_quantity: int | None = 10,
    ) -> Product:
        product = Product(
            store_id=store_id,
            shopify_product_id=shopify_product_id or str(uuid.uuid4().int)[:12],
            title=title,
            status=status,
            price=price,
            inventory_quantity=inventory_quantity,
        )
        db_session.add(product)
        await db_session.commit()
        await db_session.refresh(product)
        return product

    return _create


@pytest.fixture
def order_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates Order instances dated by ``order_date``."""

    async def _create(
        *,
        store_id: UUID,
        order_date: str,
        total_price: float = 100.0,
        shopify_order_id: str | None = None,
        customer_id: UUID | None = None,
        currency: str = "USD",
    ) -> Order:
        order = Order(
            store_id=store_id,
            shopify_order_id=shopify_order_id or str(uuid.uuid4().int)[:12],
            customer_id=customer_id,
            total_price=total_price,
            currency=currency,
            order_date=order_date,
            shopify_created_at=order_date,
        )
        db_session.add(order)
        await db_session.commit()
        await db_session.refresh(order)
        return order

    return _create


@pytest.fixture
def line_item_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates OrderLineItem instances."""

    async def _create(
        *,
        store_id: UUID,
        order_id: UUID,
        title: str = "Widget",
        shopify_product_id: str | None = "111",
        quantity: int = 1,
        price: float = 10.0,
    ) -> OrderLineItem:
        item = OrderLineItem(
            store_id=store_id,
            order_id=order_id,
            title=title,
            shopify_product_id=shopify_product_id,
            quantity=quantity,
            price=price,
        )
        db_session.add(item)
        await db_session.commit()
        await db_session.refresh(item)
        return item

    return _create


@pytest.fixture
def sync_log_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates SyncLog instances."""

    async def _create(
        *,
        store_id: UUID,
        sync_type: SyncType = SyncType.ORDERS,
        status: SyncStatus = SyncStatus.SUCCESS,
        started_at: datetime | None = None,
        records_processed: int | None = 0,
    ) -> SyncLog:
        log = SyncLog(
            store_id=store_id,
            sync_type=sync_type,
            status=status,
            started_at=started_at or datetime.now(UTC),
            records_processed=records_processed,
        )
        db_session.add(log)
        await db_session.commit()
        await db_session.refresh(log)
        return log

    return _create


# ---------------------------------------------------------------------------
# Shopify Testing Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def set_shopify_test_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure Shopify settings are set for all tests.

    This is autouse=True so all tests have consistent Shopify config.
    """
    monkeypatch.setattr(
        "shopmetrics.core.config.settings.shopify_client_secret", SHOPIFY_TEST_CLIENT_SECRET
    )


@pytest.fixture
def shopify_webhook_signature() -> Callable[[bytes], str]:
    """Generate a valid Shopify webhook HMAC signature for a given body.

    Usage:
        signature = shopify_webhook_signature(b'{"id": 123}')
        headers = {"X-Shopify-Hmac-Sha256": signature, ...}
    """

    def _sign(body: bytes) -> str:
        return base64.b64encode(
            hmac.new(
                SHOPIFY_TEST_CLIENT_SECRET.encode(),
                body,
                hashlib.sha256,
            ).digest()
        ).decode()

    return _sign


@pytest.fixture
def shopify_webhook_headers(
    shopify_webhook_signature: Callable[[bytes], str],
) -> Callable[..., dict[str, str]]:
    """Generate complete Shopify webhook headers for a given body, topic and shop.

    Usage:
        body = b'{"id": 123, "title": "Product"}'
        headers = shopify_webhook_headers(body, "products/update")
        response = await client.post("/api/v1/webhooks/shopify", content=body, headers=headers)
    """

    def _headers(body: bytes, topic: str, shop: str = SHOPIFY_TEST_SHOP) -> dict[str, str]:
        return {
            "X-Shopify-Hmac-Sha256": shopify_webhook_signature(body),
            "X-Shopify-Shop-Domain": shop,
            "X-Shopify-Topic": topic,
            "Content-Type": "application/json",
        }

    return _headers


class FakeShopifySource:
    """In-memory stand-in for ShopifyClient.

    ``failures`` maps a resource name to the exception its fetch raises.
    """

    def __init__(
        self,
        *,
        customers: list[dict[str, Any]] | None = None,
        products: list[dict[str, Any]] | None = None,
        orders: list[dict[str, Any]] | None = None,
        failures: dict[str, Exception] | None = None,
    ) -> None:
        self.records = {
            "customers": customers or [],
            "products": products or [],
            "orders": orders or [],
        }
        self.failures = failures or {}

    async def _fetch(self, resource: str) -> list[dict[str, Any]]:
        if resource in self.failures:
            raise self.failures[resource]
        return list(self.records[resource])

    async def get_all_customers(self) -> list[dict[str, Any]]:
        return await self._fetch("customers")

    async def get_all_products(self) -> list[dict[str, Any]]:
        return await self._fetch("products")

    async def get_all_orders(self) -> list[dict[str, Any]]:
        return await self._fetch("orders")


@pytest.fixture
def sample_shopify_customer() -> dict[str, Any]:
    """A Shopify customer JSON as returned by the Admin API."""
    return {
        "id": 7001,
        "email": "jane@example.com",
        "first_name": "Jane",
        "last_name": "Doe",
        "phone": "+15555550100",
        "total_spent": "250.50",
        "orders_count": 3,
        "state": "enabled",
        "tags": "vip, wholesale",
        "accepts_marketing": True,
        "created_at": "2024-01-02T09:00:00-05:00",
        "updated_at": "2024-01-10T09:00:00-05:00",
    }


@pytest.fixture
def sample_shopify_product() -> dict[str, Any]:
    """A Shopify product JSON as returned by the Admin API."""
    return {
        "id": 8001,
        "title": "Classic T-Shirt",
        "handle": "classic-t-shirt",
        "product_type": "Apparel",
        "vendor": "Test Brand",
        "status": "active",
        "tags": "cotton, summer",
        "variants": [
            {
                "id": 80011,
                "price": "29.99",
                "compare_at_price": "39.99",
                "inventory_quantity": 42,
            },
            {"id": 80012, "price": "31.99", "inventory_quantity": 5},
        ],
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-05T00:00:00Z",
    }


@pytest.fixture
def sample_shopify_order() -> dict[str, Any]:
    """A Shopify order JSON as returned by the Admin API."""
    return {
        "id": 9001,
        "order_number": 1001,
        "email": "jane@example.com",
        "customer": {"id": 7001, "email": "jane@example.com"},
        "total_price": "79.98",
        "subtotal_price": "75.00",
        "total_tax": "4.98",
        "total_discounts": "0.00",
        "currency": "USD",
        "financial_status": "paid",
        "fulfillment_status": None,
        "tags": "",
        "created_at": "2024-06-15T10:30:00-04:00",
        "updated_at": "2024-06-15T10:31:00-04:00",
        "line_items": [
            {
                "product_id": 8001,
                "variant_id": 80011,
                "title": "Classic T-Shirt",
                "quantity": 2,
                "price": "29.99",
                "total_discount": "0.00",
                "sku": "TS-001",
            },
            {
                "product_id": None,
                "variant_id": None,
                "title": "Gift wrap",
                "quantity": 1,
                "price": "20.00",
            },
        ],
    }
