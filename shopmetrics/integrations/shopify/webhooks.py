"""Shopify webhook signature verification and topic parsing."""

import base64
import enum
import hashlib
import hmac


class WebhookResource(str, enum.Enum):
    """Resources whose webhooks are ingested."""

    CUSTOMERS = "customers"
    PRODUCTS = "products"
    ORDERS = "orders"


def compute_signature(data: bytes, secret: str) -> str:
    """Base64 HMAC-SHA256 of ``data``, as sent in X-Shopify-Hmac-Sha256."""
    digest = hmac.new(secret.encode("utf-8"), data, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("utf-8")


def verify_webhook(data: bytes, hmac_header: str, secret: str) -> bool:
    """Verify a Shopify webhook's HMAC-SHA256 signature.

    Args:
        data: The raw request body bytes.
        hmac_header: The X-Shopify-Hmac-Sha256 header value.
        secret: The app's shared secret.

    Returns:
        True if the signature is valid.
    """
    expected = compute_signature(data, secret).encode("ascii")
    return hmac.compare_digest(expected, hmac_header.encode("utf-8", "surrogateescape"))


def parse_topic(topic: str) -> tuple[WebhookResource, str] | None:
    """Split ``"orders/updated"`` into (ORDERS, "updated").

    Returns None for topics whose resource is not ingested.
    """
    resource, _, action = topic.strip().lower().partition("/")
    try:
        return WebhookResource(resource), action
    except ValueError:
        return None
