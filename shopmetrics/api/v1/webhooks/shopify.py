"""Shopify webhook receiver for customer, product and order events."""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import PlainTextResponse

from shopmetrics.core.config import settings
from shopmetrics.core.deps import DBSession
from shopmetrics.core.errors import PayloadValidationError
from shopmetrics.core.logging_config import store_log_context
from shopmetrics.integrations.shopify.webhooks import verify_webhook
from shopmetrics.services.webhook_service import ShopifyWebhookService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_class=PlainTextResponse)
async def receive_webhook(request: Request, db: DBSession) -> PlainTextResponse:
    """Verify, resolve and apply one Shopify webhook.

    The shop comes from ``X-Shopify-Shop-Domain`` or, failing that, the
    ``shop`` query parameter.
    """
    shop = request.headers.get("X-Shopify-Shop-Domain") or request.query_params.get("shop")
    if not shop:
        return PlainTextResponse("Missing shop domain", status_code=status.HTTP_400_BAD_REQUEST)

    body = await request.body()
    hmac_header = request.headers.get("X-Shopify-Hmac-Sha256", "")
    if not verify_webhook(body, hmac_header, settings.shopify_client_secret):
        logger.warning("Rejected webhook with invalid signature for %s", shop)
        return PlainTextResponse(
            "Invalid webhook signature", status_code=status.HTTP_401_UNAUTHORIZED
        )

    service = ShopifyWebhookService(db)
    store = await service.find_store_by_domain(shop)
    if store is None:
        return PlainTextResponse("Store not found", status_code=status.HTTP_404_NOT_FOUND)

    topic = request.headers.get("X-Shopify-Topic", "")
    with store_log_context(store.id):
        try:
            handled = await service.handle(store, topic, body)
        except PayloadValidationError as e:
            logger.warning("Rejected %s webhook: %s", topic, e)
            return PlainTextResponse(str(e), status_code=status.HTTP_400_BAD_REQUEST)
        except Exception:
            logger.exception("Failed to process %s webhook", topic)
            return PlainTextResponse(
                "Internal error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    if not handled:
        return PlainTextResponse("Unhandled topic")
    return PlainTextResponse("OK")
