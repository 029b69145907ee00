"""Analytics Pydantic schemas for the store dashboard."""

from typing import Literal
from uuid import UUID

from shopmetrics.schemas.common import BaseSchema

RevenuePeriod = Literal["7d", "30d", "90d", "1y"]


class DashboardOverview(BaseSchema):
    """Headline numbers for a store."""

    total_customers: int
    total_orders: int
    total_products: int
    total_revenue: float
    average_order_value: float
    order_growth: float  # week over week, percent
    revenue_growth: float  # week over week, percent


class TopCustomer(BaseSchema):
    """A customer ranked by lifetime spend."""

    id: UUID
    name: str
    email: str | None
    total_spent: float
    orders_count: int


class DailyOrderBucket(BaseSchema):
    """Orders placed on one day."""

    date: str  # YYYY-MM-DD
    count: int
    revenue: float


class RecentActivity(BaseSchema):
    orders_last_30_days: int
    revenue_last_30_days: float


class DashboardAnalytics(BaseSchema):
    """Full dashboard payload."""

    overview: DashboardOverview
    top_customers: list[TopCustomer]
    chart_data: list[DailyOrderBucket]
    recent_activity: RecentActivity


class RevenueTrendPoint(BaseSchema):
    """Revenue for one day (YYYY-MM-DD) or month (YYYY-MM)."""

    period: str
    revenue: float
    orders: int


class CustomerStats(BaseSchema):
    total_customers: int
    total_spent: float
    average_spent: float


class OrderStats(BaseSchema):
    total_orders: int
    total_revenue: float
    average_order_value: float
    recent_orders_count: int
    recent_revenue: float


class ProductStats(BaseSchema):
    total_products: int
    active_products: int
    total_inventory: int
