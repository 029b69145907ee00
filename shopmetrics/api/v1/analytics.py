"""Store analytics endpoints for the dashboard."""

from uuid import UUID

from fastapi import APIRouter, Query

from shopmetrics.core.deps import CurrentUser, DBSession, get_store_for_owner
from shopmetrics.schemas.analytics import (
    CustomerStats,
    DailyOrderBucket,
    DashboardAnalytics,
    OrderStats,
    ProductStats,
    RevenuePeriod,
    RevenueTrendPoint,
    TopCustomer,
)
from shopmetrics.services.analytics_service import StoreAnalyticsService

router = APIRouter()


@router.get("/dashboard", response_model=DashboardAnalytics)
async def dashboard(
    user: CurrentUser,
    db: DBSession,
    store_id: UUID = Query(...),
) -> DashboardAnalytics:
    """Overview, top customers, 30-day chart and recent activity. Requires authentication."""
    await get_store_for_owner(store_id, user, db)
    service = StoreAnalyticsService(db)
    return await service.get_dashboard(store_id)


@router.get("/revenue-trends", response_model=list[RevenueTrendPoint])
async def revenue_trends(
    user: CurrentUser,
    db: DBSession,
    store_id: UUID = Query(...),
    period: RevenuePeriod = Query("30d"),
) -> list[RevenueTrendPoint]:
    """Revenue per day (7d/30d/90d) or per month (1y). Requires authentication."""
    await get_store_for_owner(store_id, user, db)
    service = StoreAnalyticsService(db)
    return await service.get_revenue_trends(store_id, period)


@router.get("/top-customers", response_model=list[TopCustomer])
async def top_customers(
    user: CurrentUser,
    db: DBSession,
    store_id: UUID = Query(...),
    limit: int = Query(5, ge=1, le=100),
) -> list[TopCustomer]:
    await get_store_for_owner(store_id, user, db)
    service = StoreAnalyticsService(db)
    return await service.get_top_customers(store_id, limit)


@router.get("/customers", response_model=CustomerStats)
async def customer_stats(
    user: CurrentUser,
    db: DBSession,
    store_id: UUID = Query(...),
) -> CustomerStats:
    await get_store_for_owner(store_id, user, db)
    service = StoreAnalyticsService(db)
    return await service.get_customer_stats(store_id)


@router.get("/orders", response_model=OrderStats)
async def order_stats(
    user: CurrentUser,
    db: DBSession,
    store_id: UUID = Query(...),
) -> OrderStats:
    await get_store_for_owner(store_id, user, db)
    service = StoreAnalyticsService(db)
    return await service.get_order_stats(store_id)


@router.get("/products", response_model=ProductStats)
async def product_stats(
    user: CurrentUser,
    db: DBSession,
    store_id: UUID = Query(...),
) -> ProductStats:
    await get_store_for_owner(store_id, user, db)
    service = StoreAnalyticsService(db)
    return await service.get_product_stats(store_id)


@router.get("/orders/by-date", response_model=list[DailyOrderBucket])
async def orders_by_date_range(
    user: CurrentUser,
    db: DBSession,
    store_id: UUID = Query(...),
    start_date: str = Query(..., min_length=1),
    end_date: str = Query(..., min_length=1),
) -> list[DailyOrderBucket]:
    """Daily order buckets between two ISO date strings, both inclusive.

    Bounds are compared as strings against the stored order date, so an
    end date of ``2024-01-31`` excludes orders later on that day; pass
    ``2024-01-31T23:59:59`` to include them.
    """
    await get_store_for_owner(store_id, user, db)
    service = StoreAnalyticsService(db)
    return await service.get_orders_by_date_range(store_id, start_date, end_date)
