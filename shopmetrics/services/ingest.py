"""Write one validated Shopify record through the upsert layer.

Shared by the sync orchestrator and the webhook handler so both paths
produce identical rows.
"""

from uuid import UUID

from shopmetrics.integrations.shopify.mapping import (
    map_customer,
    map_line_item,
    map_order,
    map_product,
)
from shopmetrics.models.store import Store
from shopmetrics.schemas.shopify import CustomerPayload, OrderPayload, ProductPayload
from shopmetrics.services.upsert_service import UpsertService


async def ingest_customer(upserts: UpsertService, store: Store, payload: CustomerPayload) -> UUID:
    return await upserts.upsert_customer(map_customer(store.id, payload))


async def ingest_product(upserts: UpsertService, store: Store, payload: ProductPayload) -> UUID:
    return await upserts.upsert_product(map_product(store.id, payload))


async def ingest_order(upserts: UpsertService, store: Store, payload: OrderPayload) -> UUID:
    """Upsert an order, linking its customer if already synced, then its lines.

    Line items are written one after another in payload order.
    """
    # A lost insert race rolls the session back and expires ``store``.
    store_id, currency = store.id, store.currency

    customer_id = None
    if payload.customer is not None and payload.customer.id:
        customer = await upserts.get_customer_by_shopify_id(store_id, payload.customer.id)
        customer_id = customer.id if customer else None

    order_id = await upserts.upsert_order(
        map_order(store_id, payload, customer_id=customer_id, default_currency=currency)
    )

    for line_item in payload.line_items:
        await upserts.upsert_line_item(map_line_item(store_id, order_id, line_item))

    return order_id
