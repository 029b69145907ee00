"""Shopify Admin API client using httpx."""

import logging
from typing import Any, Protocol

import httpx

from shopmetrics.core.config import settings

logger = logging.getLogger(__name__)

PAGE_LIMIT = 250


class ShopifyDataSource(Protocol):
    """Anything the sync orchestrator can pull raw Shopify records from."""

    async def get_all_customers(self) -> list[dict[str, Any]]: ...

    async def get_all_products(self) -> list[dict[str, Any]]: ...

    async def get_all_orders(self) -> list[dict[str, Any]]: ...


class ShopifyClient:
    """Async client for the Shopify Admin REST API."""

    def __init__(self, shop_domain: str, access_token: str) -> None:
        self.shop_domain = shop_domain
        self.base_url = f"https://{shop_domain}/admin/api/{settings.shopify_api_version}"
        self.headers = {
            "X-Shopify-Access-Token": access_token,
            "Content-Type": "application/json",
        }

    async def get_all_customers(self) -> list[dict[str, Any]]:
        """Fetch every customer of the shop."""
        return await self._get_all("customers", f"customers.json?limit={PAGE_LIMIT}")

    async def get_all_products(self) -> list[dict[str, Any]]:
        """Fetch every product of the shop."""
        return await self._get_all("products", f"products.json?limit={PAGE_LIMIT}")

    async def get_all_orders(self) -> list[dict[str, Any]]:
        """Fetch every order of the shop, open or closed."""
        return await self._get_all("orders", f"orders.json?status=any&limit={PAGE_LIMIT}")

    async def _get_all(self, resource: str, path: str) -> list[dict[str, Any]]:
        """Follow Link-header cursors until the last page."""
        records: list[dict[str, Any]] = []
        url: str | None = f"{self.base_url}/{path}"

        async with httpx.AsyncClient(headers=self.headers, timeout=30.0) as client:
            while url:
                response = await client.get(url)
                response.raise_for_status()
                records.extend(response.json().get(resource, []))
                url = self._get_next_page_url(response)

        logger.debug("Fetched %d %s from %s", len(records), resource, self.shop_domain)
        return records

    def _get_next_page_url(self, response: httpx.Response) -> str | None:
        """Extract next page URL from Link header for cursor pagination."""
        link_header = response.headers.get("link", "")
        if not link_header:
            return None

        for part in link_header.split(","):
            if 'rel="next"' in part:
                url: str = part.split(";")[0].strip().strip("<>")
                return url
        return None
