"""API v1 router combining all route modules."""

from typing import Any

from fastapi import APIRouter

from shopmetrics.api.v1 import analytics, customers, health, orders, products, stores
from shopmetrics.api.v1.webhooks import shopify as shopify_webhooks
from shopmetrics.schemas.common import ErrorResponse

# Error bodies shared by every store-scoped route
STORE_ERRORS: dict[int | str, dict[str, Any]] = {
    401: {"model": ErrorResponse, "description": "Missing or invalid bearer token"},
    403: {"model": ErrorResponse, "description": "Store not found or access denied"},
}

SYNC_ERRORS: dict[int | str, dict[str, Any]] = {
    409: {"model": ErrorResponse, "description": "A sync is already running for the store"},
    502: {"model": ErrorResponse, "description": "An entity sync failed"},
}

api_router = APIRouter()

# Include health check routes (no prefix)
api_router.include_router(health.router)

# Store details, sync trigger and sync history
api_router.include_router(
    stores.router,
    prefix="/stores",
    tags=["stores"],
    responses={**STORE_ERRORS, **SYNC_ERRORS},
)

# Synced records
api_router.include_router(
    customers.router,
    prefix="/customers",
    tags=["customers"],
    responses=STORE_ERRORS,
)
api_router.include_router(
    products.router,
    prefix="/products",
    tags=["products"],
    responses=STORE_ERRORS,
)

# Order listing and line items
api_router.include_router(
    orders.router,
    prefix="/orders",
    tags=["orders"],
    responses={
        **STORE_ERRORS,
        400: {"model": ErrorResponse, "description": "Incomplete order date range"},
        404: {"model": ErrorResponse, "description": "Order not found"},
    },
)

# Store analytics dashboard
api_router.include_router(
    analytics.router,
    prefix="/analytics",
    tags=["analytics"],
    responses=STORE_ERRORS,
)

# Shopify webhooks (no auth - verified via HMAC)
api_router.include_router(
    shopify_webhooks.router,
    prefix="/webhooks/shopify",
    tags=["webhooks"],
)
