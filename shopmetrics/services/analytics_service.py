"""Store analytics computed on demand from synced customers, orders and products.

Nothing here is cached or materialized: every call loads the store's rows
and aggregates them in Python. Money is summed as plain floats in load
order.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopmetrics.models.customer import Customer
from shopmetrics.models.order import Order
from shopmetrics.models.product import Product
from shopmetrics.schemas.analytics import (
    CustomerStats,
    DailyOrderBucket,
    DashboardAnalytics,
    DashboardOverview,
    OrderStats,
    ProductStats,
    RecentActivity,
    RevenuePeriod,
    RevenueTrendPoint,
    TopCustomer,
)

logger = logging.getLogger(__name__)

PERIOD_DAYS: dict[str, int] = {"7d": 7, "30d": 30, "90d": 90, "1y": 365}
RECENT_WINDOW_DAYS = 30
TOP_CUSTOMERS_LIMIT = 5


def parse_order_date(value: str) -> datetime | None:
    """Parse an ISO-8601 order date; naive values are taken as UTC.

    Returns None for strings that are not dates, which keeps such orders
    out of every time-windowed figure.
    """
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def day_key(order_date: str) -> str:
    """``"2024-01-05T10:00:00Z"`` -> ``"2024-01-05"``."""
    return order_date.split("T")[0]


def month_key(order_date: datetime) -> str:
    utc = order_date.astimezone(UTC)
    return f"{utc.year}-{utc.month:02d}"


def growth_percent(current: float, previous: float) -> float:
    """Percent change from previous to current; 0 when there is no previous value."""
    if previous > 0:
        return (current - previous) / previous * 100
    return 0.0


def sum_revenue(orders: Iterable[Order]) -> float:
    return sum((order.total_price for order in orders), 0.0)


def orders_between(
    orders: Iterable[Order], start: datetime, end: datetime | None = None
) -> list[Order]:
    """Orders dated at or after ``start`` and, if given, strictly before ``end``."""
    selected = []
    for order in orders:
        placed = parse_order_date(order.order_date)
        if placed is None or placed < start:
            continue
        if end is not None and placed >= end:
            continue
        selected.append(order)
    return selected


def group_orders_by_day(orders: Iterable[Order]) -> list[DailyOrderBucket]:
    """Bucket orders by the date part of ``order_date``, oldest first."""
    buckets: dict[str, DailyOrderBucket] = {}
    for order in orders:
        key = day_key(order.order_date)
        bucket = buckets.setdefault(key, DailyOrderBucket(date=key, count=0, revenue=0.0))
        bucket.count += 1
        bucket.revenue += order.total_price
    return [buckets[key] for key in sorted(buckets)]


def top_customers(
    customers: Sequence[Customer], limit: int = TOP_CUSTOMERS_LIMIT
) -> list[TopCustomer]:
    """Highest total_spent first. Ties keep their load order."""
    ranked = sorted(customers, key=lambda c: c.total_spent, reverse=True)
    return [
        TopCustomer(
            id=c.id,
            name=c.display_name,
            email=c.email,
            total_spent=c.total_spent,
            orders_count=c.orders_count,
        )
        for c in ranked[:limit]
    ]


def summarize_dashboard(
    customers: Sequence[Customer],
    orders: Sequence[Order],
    total_products: int,
    now: datetime,
) -> DashboardAnalytics:
    """Overview, top customers, 30-day daily chart and week-over-week growth."""
    total_orders = len(orders)
    total_revenue = sum_revenue(orders)
    average_order_value = total_revenue / total_orders if total_orders > 0 else 0.0

    recent = orders_between(orders, now - timedelta(days=RECENT_WINDOW_DAYS))

    week_ago = now - timedelta(days=7)
    this_week = orders_between(orders, week_ago)
    last_week = orders_between(orders, now - timedelta(days=14), week_ago)

    return DashboardAnalytics(
        overview=DashboardOverview(
            total_customers=len(customers),
            total_orders=total_orders,
            total_products=total_products,
            total_revenue=total_revenue,
            average_order_value=average_order_value,
            order_growth=growth_percent(len(this_week), len(last_week)),
            revenue_growth=growth_percent(sum_revenue(this_week), sum_revenue(last_week)),
        ),
        top_customers=top_customers(customers),
        chart_data=group_orders_by_day(recent),
        recent_activity=RecentActivity(
            orders_last_30_days=len(recent),
            revenue_last_30_days=sum_revenue(recent),
        ),
    )


def revenue_trends(
    orders: Iterable[Order], period: RevenuePeriod, now: datetime
) -> list[RevenueTrendPoint]:
    """Revenue and order count per day (7d/30d/90d) or per month (1y).

    Keys are ``YYYY-MM-DD`` or ``YYYY-MM`` strings, so sorting them
    lexicographically orders them in time.
    """
    by_month = period == "1y"
    start = now - timedelta(days=PERIOD_DAYS[period])

    points: dict[str, RevenueTrendPoint] = {}
    for order in orders:
        placed = parse_order_date(order.order_date)
        if placed is None or placed < start:
            continue
        key = month_key(placed) if by_month else day_key(order.order_date)
        point = points.setdefault(key, RevenueTrendPoint(period=key, revenue=0.0, orders=0))
        point.revenue += order.total_price
        point.orders += 1

    return [points[key] for key in sorted(points)]


def customer_stats(customers: Sequence[Customer]) -> CustomerStats:
    total = len(customers)
    total_spent = sum((c.total_spent for c in customers), 0.0)
    return CustomerStats(
        total_customers=total,
        total_spent=total_spent,
        average_spent=total_spent / total if total > 0 else 0.0,
    )


def order_stats(orders: Sequence[Order], now: datetime) -> OrderStats:
    total = len(orders)
    revenue = sum_revenue(orders)
    recent = orders_between(orders, now - timedelta(days=RECENT_WINDOW_DAYS))
    return OrderStats(
        total_orders=total,
        total_revenue=revenue,
        average_order_value=revenue / total if total > 0 else 0.0,
        recent_orders_count=len(recent),
        recent_revenue=sum_revenue(recent),
    )


def product_stats(products: Sequence[Product]) -> ProductStats:
    return ProductStats(
        total_products=len(products),
        active_products=sum(1 for p in products if p.status == "active"),
        total_inventory=sum(p.inventory_quantity or 0 for p in products),
    )


class StoreAnalyticsService:
    """Loads a store's rows and runs the aggregations above.

    Ownership of the store is checked by the caller.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _customers(self, store_id: UUID) -> list[Customer]:
        stmt = select(Customer).where(Customer.store_id == store_id).order_by(Customer.created_at)
        return list((await self.db.execute(stmt)).scalars().all())

    async def _orders(self, store_id: UUID) -> list[Order]:
        stmt = select(Order).where(Order.store_id == store_id).order_by(Order.created_at)
        return list((await self.db.execute(stmt)).scalars().all())

    async def _products(self, store_id: UUID) -> list[Product]:
        stmt = select(Product).where(Product.store_id == store_id)
        return list((await self.db.execute(stmt)).scalars().all())

    async def get_dashboard(
        self, store_id: UUID, now: datetime | None = None
    ) -> DashboardAnalytics:
        customers = await self._customers(store_id)
        orders = await self._orders(store_id)
        product_count_stmt = (
            select(func.count()).select_from(Product).where(Product.store_id == store_id)
        )
        total_products = (await self.db.execute(product_count_stmt)).scalar() or 0

        logger.debug(
            "Dashboard for store %s: %d customers, %d orders", store_id, len(customers), len(orders)
        )
        return summarize_dashboard(customers, orders, total_products, now or datetime.now(UTC))

    async def get_revenue_trends(
        self, store_id: UUID, period: RevenuePeriod, now: datetime | None = None
    ) -> list[RevenueTrendPoint]:
        orders = await self._orders(store_id)
        return revenue_trends(orders, period, now or datetime.now(UTC))

    async def get_top_customers(
        self, store_id: UUID, limit: int = TOP_CUSTOMERS_LIMIT
    ) -> list[TopCustomer]:
        return top_customers(await self._customers(store_id), limit)

    async def get_customer_stats(self, store_id: UUID) -> CustomerStats:
        return customer_stats(await self._customers(store_id))

    async def get_order_stats(self, store_id: UUID, now: datetime | None = None) -> OrderStats:
        return order_stats(await self._orders(store_id), now or datetime.now(UTC))

    async def get_product_stats(self, store_id: UUID) -> ProductStats:
        return product_stats(await self._products(store_id))

    async def get_orders_by_date_range(
        self, store_id: UUID, start_date: str, end_date: str
    ) -> list[DailyOrderBucket]:
        """Daily buckets for orders whose order_date string lies in [start, end]."""
        stmt = select(Order).where(
            Order.store_id == store_id,
            Order.order_date >= start_date,
            Order.order_date <= end_date,
        )
        orders = (await self.db.execute(stmt)).scalars().all()
        return group_orders_by_day(orders)
