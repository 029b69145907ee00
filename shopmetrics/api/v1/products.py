"""Product listing endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query

from shopmetrics.core.deps import CurrentUser, DBSession, get_store_for_owner
from shopmetrics.schemas.common import PaginatedResponse
from shopmetrics.schemas.product import ProductResponse
from shopmetrics.services.records_service import StoreRecordsService, page_count

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[ProductResponse])
async def list_products(
    user: CurrentUser,
    db: DBSession,
    store_id: UUID = Query(...),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[ProductResponse]:
    """List a store's synced products, newest first."""
    await get_store_for_owner(store_id, user, db)
    products, total = await StoreRecordsService(db).list_products(store_id, page, page_size)
    return PaginatedResponse[ProductResponse](
        items=[ProductResponse.model_validate(p) for p in products],
        total=total,
        page=page,
        page_size=page_size,
        pages=page_count(total, page_size),
    )
