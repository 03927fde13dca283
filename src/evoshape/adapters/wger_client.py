"""wger exercise catalog client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from evoshape.domain.errors import UpstreamError


class WgerClient(Protocol):
    """Interface for paging through the wger exercise catalog."""

    def first_page_url(self, page_size: int) -> str:
        """Return the URL of the first catalog page."""

    async def fetch_page(self, url: str) -> dict[str, object]:
        """Return one raw catalog page with ``results`` and ``next``."""


@dataclass
class HttpxWgerClient(WgerClient):
    """HTTPX-backed wger client."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxWgerClient":
        """Create a client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient())

    def first_page_url(self, page_size: int) -> str:
        return f"{self.base_url}/exerciseinfo/?limit={page_size}"

    async def fetch_page(self, url: str) -> dict[str, object]:
        response = await self.http_client.get(url, timeout=15)
        if response.is_error:
            raise UpstreamError("wger request failed", response.status_code)
        return response.json()

    async def close(self) -> None:
        await self.http_client.aclose()
