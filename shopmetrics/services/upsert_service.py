"""Idempotent create-or-update of synced records keyed by Shopify ids."""

import logging
from collections.abc import Sequence
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shopmetrics.models.base import Base
from shopmetrics.models.customer import Customer
from shopmetrics.models.order import Order
from shopmetrics.models.order_line_item import OrderLineItem
from shopmetrics.models.product import Product

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

# Written on insert only; an update never rewrites them.
_INSERT_ONLY = ("store_id", "shopify_created_at")

# Line items are matched on (order, product) and only these are replaced.
_LINE_ITEM_MUTABLE = ("title", "quantity", "price", "total_discount", "sku")


class UpsertService:
    """Create-or-replace writes for customers, products, orders and line items.

    Each call looks up the record by its natural key, then either replaces
    its mutable fields or inserts it, and commits. Callers must pass the
    full attribute set: fields missing from ``values`` are not merged.

    Customers, products and orders also carry a unique index on their
    natural key. When two concurrent inserts race, the loser's commit
    fails and the call is retried as an update of the winner's row.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def upsert_customer(self, values: dict[str, Any]) -> UUID:
        return await self._upsert(
            Customer,
            [
                Customer.store_id == values["store_id"],
                Customer.shopify_customer_id == values["shopify_customer_id"],
            ],
            values,
            key_fields=("shopify_customer_id",),
        )

    async def upsert_product(self, values: dict[str, Any]) -> UUID:
        return await self._upsert(
            Product,
            [
                Product.store_id == values["store_id"],
                Product.shopify_product_id == values["shopify_product_id"],
            ],
            values,
            key_fields=("shopify_product_id",),
        )

    async def upsert_order(self, values: dict[str, Any]) -> UUID:
        return await self._upsert(
            Order,
            [
                Order.store_id == values["store_id"],
                Order.shopify_order_id == values["shopify_order_id"],
            ],
            values,
            key_fields=("shopify_order_id",),
        )

    async def upsert_line_item(self, values: dict[str, Any]) -> UUID:
        """Upsert a line item matched on (order_id, shopify_product_id).

        A missing product id matches another line of the same order that
        also lacks one.
        """
        product_id = values.get("shopify_product_id")
        product_match = (
            OrderLineItem.shopify_product_id.is_(None)
            if product_id is None
            else OrderLineItem.shopify_product_id == product_id
        )
        existing = await self._find(
            OrderLineItem, [OrderLineItem.order_id == values["order_id"], product_match]
        )

        if existing is None:
            item = OrderLineItem(**values)
            self.db.add(item)
            await self.db.flush()
            item_id = item.id
        else:
            for field in _LINE_ITEM_MUTABLE:
                setattr(existing, field, values.get(field))
            item_id = existing.id

        await self.db.commit()
        return item_id

    async def get_customer_by_shopify_id(
        self, store_id: UUID, shopify_customer_id: str
    ) -> Customer | None:
        """Point lookup of a customer by its Shopify id."""
        return await self._find(
            Customer,
            [
                Customer.store_id == store_id,
                Customer.shopify_customer_id == shopify_customer_id,
            ],
        )

    async def _find(
        self, model: type[ModelT], conditions: Sequence[ColumnElement[bool]]
    ) -> ModelT | None:
        stmt = select(model).where(*conditions).limit(1)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def _upsert(
        self,
        model: type[ModelT],
        conditions: Sequence[ColumnElement[bool]],
        values: dict[str, Any],
        *,
        key_fields: tuple[str, ...],
    ) -> UUID:
        existing = await self._find(model, conditions)

        if existing is None:
            record = model(**values)
            self.db.add(record)
            try:
                await self.db.flush()
                record_id: UUID = record.id
                await self.db.commit()
                return record_id
            except IntegrityError:
                await self.db.rollback()
                existing = await self._find(model, conditions)
                if existing is None:
                    raise
                logger.info(
                    "Concurrent insert of %s %s; updating the existing row",
                    model.__name__,
                    {k: values[k] for k in key_fields},
                )

        skip = set(_INSERT_ONLY) | set(key_fields)
        for field, value in values.items():
            if field not in skip:
                setattr(existing, field, value)
        existing_id: UUID = existing.id
        await self.db.commit()
        return existing_id
