"""Customer listing endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query

from shopmetrics.core.deps import CurrentUser, DBSession, get_store_for_owner
from shopmetrics.schemas.common import PaginatedResponse
from shopmetrics.schemas.customer import CustomerResponse
from shopmetrics.services.records_service import StoreRecordsService, page_count

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[CustomerResponse])
async def list_customers(
    user: CurrentUser,
    db: DBSession,
    store_id: UUID = Query(...),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[CustomerResponse]:
    """List a store's synced customers, newest first."""
    await get_store_for_owner(store_id, user, db)
    customers, total = await StoreRecordsService(db).list_customers(store_id, page, page_size)
    return PaginatedResponse[CustomerResponse](
        items=[CustomerResponse.model_validate(c) for c in customers],
        total=total,
        page=page,
        page_size=page_size,
        pages=page_count(total, page_size),
    )
