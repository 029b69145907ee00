"""HMAC signing helper for simulating Shopify webhooks.

Reads a JSON body from stdin and prints its base64-encoded HMAC-SHA256
signature, using SHOPIFY_CLIENT_SECRET from the environment (or .env).

Usage:
    echo -n '{"id": 123}' | python -m scripts.sign_webhook

    # Full curl example:
    BODY='{"id":9001,"total_price":"79.98","created_at":"2024-06-15T10:30:00Z"}'
    HMAC=$(echo -n "$BODY" | python -m scripts.sign_webhook)
    curl -X POST http://localhost:8000/api/v1/webhooks/shopify \\
      -H "Content-Type: application/json" \\
      -H "X-Shopify-Hmac-Sha256: $HMAC" \\
      -H "X-Shopify-Shop-Domain: test-store.myshopify.com" \\
      -H "X-Shopify-Topic: orders/create" \\
      -d "$BODY"
"""

import sys

from shopmetrics.core.config import settings
from shopmetrics.integrations.shopify.webhooks import compute_signature


def main() -> None:
    secret = settings.shopify_client_secret
    if not secret:
        print("ERROR: SHOPIFY_CLIENT_SECRET is not set in .env", file=sys.stderr)
        sys.exit(1)

    body = sys.stdin.buffer.read()
    if not body:
        print("ERROR: No input received on stdin", file=sys.stderr)
        sys.exit(1)

    print(compute_signature(body, secret), end="")


if __name__ == "__main__":
    main()
