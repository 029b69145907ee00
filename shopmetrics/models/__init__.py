"""SQLAlchemy models."""

from shopmetrics.models.base import Base
from shopmetrics.models.customer import Customer
from shopmetrics.models.order import Order
from shopmetrics.models.order_line_item import OrderLineItem
from shopmetrics.models.product import Product
from shopmetrics.models.store import Store
from shopmetrics.models.sync_log import SyncLog, SyncStatus, SyncType

__all__ = [
    # Base
    "Base",
    # Tenancy
    "Store",
    # Synced entities
    "Customer",
    "Product",
    "Order",
    "OrderLineItem",
    # Sync audit
    "SyncLog",
    "SyncStatus",
    "SyncType",
]
