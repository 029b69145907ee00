"""Order listing and detail endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query
from sqlalchemy import select

from shopmetrics.core.deps import CurrentUser, DBSession, get_store_for_owner
from shopmetrics.core.errors import NotFoundError
from shopmetrics.models.order import Order
from shopmetrics.models.order_line_item import OrderLineItem
from shopmetrics.schemas.common import PaginatedResponse
from shopmetrics.schemas.order import OrderLineItemResponse, OrderResponse
from shopmetrics.services.records_service import StoreRecordsService, page_count

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[OrderResponse])
async def list_orders(
    user: CurrentUser,
    db: DBSession,
    store_id: UUID = Query(...),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    start_date: str | None = Query(None, min_length=1),
    end_date: str | None = Query(None, min_length=1),
) -> PaginatedResponse[OrderResponse]:
    """List a store's orders, newest first.

    With both ``start_date`` and ``end_date`` only orders dated inside the
    inclusive range are returned, latest order date first. Passing just
    one of them is a 400.
    """
    await get_store_for_owner(store_id, user, db)
    orders, total = await StoreRecordsService(db).list_orders(
        store_id, page, page_size, start_date=start_date, end_date=end_date
    )
    return PaginatedResponse[OrderResponse](
        items=[OrderResponse.model_validate(o) for o in orders],
        total=total,
        page=page,
        page_size=page_size,
        pages=page_count(total, page_size),
    )


@router.get("/{order_id}/line-items", response_model=list[OrderLineItemResponse])
async def list_line_items(
    order_id: UUID,
    user: CurrentUser,
    db: DBSession,
) -> list[OrderLineItemResponse]:
    """Line items of an order in the caller's store.

    Returns 404 for an unknown order and 403 if the order belongs to
    another user's store.
    """
    order = await db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    await get_store_for_owner(order.store_id, user, db)

    stmt = (
        select(OrderLineItem)
        .where(OrderLineItem.order_id == order_id)
        .order_by(OrderLineItem.created_at)
    )
    result = await db.execute(stmt)
    return [OrderLineItemResponse.model_validate(item) for item in result.scalars().all()]
