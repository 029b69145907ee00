"""Apply Shopify webhook events to the store's synced data."""

import logging

from pydantic import ValidationError
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopmetrics.core.errors import PayloadValidationError
from shopmetrics.integrations.shopify.webhooks import WebhookResource, parse_topic
from shopmetrics.models.customer import Customer
from shopmetrics.models.order import Order
from shopmetrics.models.order_line_item import OrderLineItem
from shopmetrics.models.product import Product
from shopmetrics.models.store import Store
from shopmetrics.schemas.shopify import (
    CustomerPayload,
    DeletePayload,
    OrderPayload,
    ProductPayload,
)
from shopmetrics.services.ingest import ingest_customer, ingest_order, ingest_product
from shopmetrics.services.upsert_service import UpsertService

logger = logging.getLogger(__name__)

DELETE_ACTION = "delete"


class ShopifyWebhookService:
    """Route a webhook by topic to the upsert layer or a delete."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.upserts = UpsertService(db)

    async def find_store_by_domain(self, shop_domain: str) -> Store | None:
        """Look up a store by its myshopify domain, ignoring case."""
        stmt = (
            select(Store)
            .where(func.lower(Store.shopify_domain) == shop_domain.strip().lower())
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def handle(self, store: Store, topic: str, body: bytes) -> bool:
        """Apply one webhook body to ``store``.

        Returns:
            False if the topic is not one we ingest, True once applied.

        Raises:
            PayloadValidationError: If the body does not match the topic's schema.
        """
        parsed = parse_topic(topic)
        if parsed is None:
            return False
        resource, action = parsed
        store_id = store.id

        try:
            if action == DELETE_ACTION:
                await self._delete(store, resource, DeletePayload.model_validate_json(body))
            elif resource is WebhookResource.CUSTOMERS:
                await ingest_customer(
                    self.upserts, store, CustomerPayload.model_validate_json(body)
                )
            elif resource is WebhookResource.PRODUCTS:
                await ingest_product(self.upserts, store, ProductPayload.model_validate_json(body))
            else:
                await ingest_order(self.upserts, store, OrderPayload.model_validate_json(body))
        except ValidationError as e:
            raise PayloadValidationError(
                f"Invalid {resource.value} payload: {e.error_count()} validation error(s)"
            ) from e

        logger.info("Applied %s webhook for store %s", topic, store_id)
        return True

    async def _delete(
        self, store: Store, resource: WebhookResource, payload: DeletePayload
    ) -> None:
        if resource is WebhookResource.CUSTOMERS:
            await self.db.execute(
                delete(Customer).where(
                    Customer.store_id == store.id,
                    Customer.shopify_customer_id == payload.id,
                )
            )
        elif resource is WebhookResource.PRODUCTS:
            await self.db.execute(
                delete(Product).where(
                    Product.store_id == store.id,
                    Product.shopify_product_id == payload.id,
                )
            )
        else:
            order_ids = select(Order.id).where(
                Order.store_id == store.id,
                Order.shopify_order_id == payload.id,
            )
            await self.db.execute(
                delete(OrderLineItem).where(OrderLineItem.order_id.in_(order_ids))
            )
            await self.db.execute(
                delete(Order).where(
                    Order.store_id == store.id,
                    Order.shopify_order_id == payload.id,
                )
            )
        await self.db.commit()
