"""Open Food Facts API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

PRODUCT_FIELDS = (
    "code,product_name,brands,serving_size,nutriments,image_front_thumb_url,quantity"
)


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts interactions."""

    async def search_products(
        self, query: str, page: int = 1, page_size: int = 25
    ) -> dict[str, object]:
        """Search products by text and return raw API data."""

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product by barcode and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout_seconds: float = 10
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session.

        Open Food Facts asks every caller to send a descriptive User-Agent.
        """
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(headers={"User-Agent": user_agent}),
            timeout_seconds=timeout_seconds,
        )

    async def search_products(
        self, query: str, page: int = 1, page_size: int = 25
    ) -> dict[str, object]:
        """Search products by name."""
        url = f"{self.base_url}/cgi/search.pl"
        response = await self.http_client.get(
            url,
            params={
                "search_terms": query,
                "search_simple": 1,
                "action": "process",
                "json": 1,
                "page": page,
                "page_size": page_size,
                "fields": PRODUCT_FIELDS,
            },
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product by barcode."""
        url = f"{self.base_url}/api/v2/product/{barcode}"
        response = await self.http_client.get(
            url,
            params={"fields": PRODUCT_FIELDS},
            timeout=self.timeout_seconds,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return {"status": 0}
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
