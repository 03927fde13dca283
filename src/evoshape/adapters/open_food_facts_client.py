"""Open Food Facts product lookup client."""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote

import httpx

from evoshape.domain.errors import UpstreamError

USER_AGENT = "EvoShape (https://github.com/GuillaumePevrier/evoshape)"


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts lookups."""

    async def get_product(self, code: str) -> dict[str, object]:
        """Return the raw product payload for a barcode."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient())

    async def get_product(self, code: str) -> dict[str, object]:
        """Fetch a product by barcode."""
        response = await self.http_client.get(
            f"{self.base_url}/product/{quote(code, safe='')}",
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=15,
        )
        if response.is_error:
            raise UpstreamError("Open Food Facts lookup failed", response.status_code)
        return response.json()

    async def close(self) -> None:
        await self.http_client.aclose()
