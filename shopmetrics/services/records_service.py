"""Paginated listings of a store's synced customers, products and orders."""

from collections.abc import Sequence
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopmetrics.core.errors import PayloadValidationError
from shopmetrics.models.base import Base
from shopmetrics.models.customer import Customer
from shopmetrics.models.order import Order
from shopmetrics.models.product import Product

ModelT = TypeVar("ModelT", bound=Base)


def page_count(total: int, page_size: int) -> int:
    return (total + page_size - 1) // page_size if total > 0 else 1


class StoreRecordsService:
    """Newest-first pages of one store's records."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_customers(
        self, store_id: UUID, page: int = 1, page_size: int = 20
    ) -> tuple[list[Customer], int]:
        return await self._page(
            Customer,
            [Customer.store_id == store_id],
            [Customer.created_at.desc(), Customer.id.desc()],
            page,
            page_size,
        )

    async def list_products(
        self, store_id: UUID, page: int = 1, page_size: int = 20
    ) -> tuple[list[Product], int]:
        return await self._page(
            Product,
            [Product.store_id == store_id],
            [Product.created_at.desc(), Product.id.desc()],
            page,
            page_size,
        )

    async def list_orders(
        self,
        store_id: UUID,
        page: int = 1,
        page_size: int = 20,
        *,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> tuple[list[Order], int]:
        """List orders, optionally restricted to an inclusive order-date range.

        Without a range, orders come newest synced first. With one, they are
        ordered by ``order_date`` descending and the bounds are compared as
        strings, like ``get_orders_by_date_range``.

        Raises:
            PayloadValidationError: If only one of the two bounds is given.
        """
        if (start_date is None) != (end_date is None):
            raise PayloadValidationError("start_date and end_date must be given together")

        conditions: list[ColumnElement[bool]] = [Order.store_id == store_id]
        if start_date is not None and end_date is not None:
            conditions += [Order.order_date >= start_date, Order.order_date <= end_date]
            order_by = [Order.order_date.desc(), Order.id.desc()]
        else:
            order_by = [Order.created_at.desc(), Order.id.desc()]

        return await self._page(Order, conditions, order_by, page, page_size)

    async def _page(
        self,
        model: type[ModelT],
        conditions: Sequence[ColumnElement[bool]],
        order_by: Sequence[Any],
        page: int,
        page_size: int,
    ) -> tuple[list[ModelT], int]:
        count_stmt = select(func.count()).select_from(model).where(*conditions)
        total = (await self.db.execute(count_stmt)).scalar() or 0

        stmt = (
            select(model)
            .where(*conditions)
            .order_by(*order_by)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total
