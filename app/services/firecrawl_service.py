"""Firecrawl search and scrape client.

Firecrawl returns rendered page content (markdown) inline with search
results, so a single call gives both the hit and its evidence text.
"""

import logging
import os
from collections.abc import Sequence
from typing import Any

import httpx

from app.log_utils import sanitize_for_log
from app.models import EvidenceRecord, ScrapeResult

logger = logging.getLogger(__name__)

FIRECRAWL_API_KEY = os.getenv("FIRECRAWL_API_KEY", "")
FIRECRAWL_BASE_URL = os.getenv("FIRECRAWL_BASE_URL", "https://api.firecrawl.dev/v1")

# Request timeout (seconds). Search with scraping is slow.
FIRECRAWL_TIMEOUT = float(os.getenv("FIRECRAWL_TIMEOUT", "60"))

DEFAULT_FORMATS: tuple[str, ...] = ("markdown",)


class FirecrawlService:
    """Async client for the Firecrawl /search and /scrape endpoints."""

    def __init__(self, api_key: str | None = None, base_url: str | None = None) -> None:
        self.api_key = (api_key or FIRECRAWL_API_KEY or "").strip()
        self.base_url = (base_url or FIRECRAWL_BASE_URL).rstrip("/")
        self._http_client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        """Check if the API key is configured."""
        return bool(self.api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=FIRECRAWL_TIMEOUT,
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()

    async def search(
        self,
        query: str,
        *,
        limit: int = 3,
        formats: Sequence[str] = DEFAULT_FORMATS,
    ) -> list[EvidenceRecord]:
        """Search the web and scrape each hit.

        Args:
            query: Search query, site: operators allowed.
            limit: Maximum number of results.
            formats: Rendered formats requested for each hit.

        Returns:
            Evidence records in provider relevance order.

        Raises:
            httpx.HTTPError: If the request fails.
        """
        if not self.is_configured:
            logger.warning("Firecrawl API key not configured")
            return []

        client = await self._get_client()
        payload = {
            "query": query,
            "limit": limit,
            "scrapeOptions": {"formats": list(formats)},
        }
        response = await client.post(f"{self.base_url}/search", json=payload)
        response.raise_for_status()
        data = response.json()

        if isinstance(data, dict) and not data.get("success", True):
            logger.warning(
                f"Firecrawl search unsuccessful for {sanitize_for_log(query)}: {data.get('error')}"
            )
            return []

        records: list[EvidenceRecord] = []
        for item in _result_items(data):
            record = self._parse_search_item(item)
            if record is not None:
                records.append(record)
        return records

    async def scrape(self, url: str) -> ScrapeResult:
        """Scrape a single page as markdown.

        Raises:
            httpx.HTTPError: If the request fails.
        """
        if not self.is_configured:
            logger.warning("Firecrawl API key not configured")
            return ScrapeResult(success=False)

        client = await self._get_client()
        response = await client.post(
            f"{self.base_url}/scrape",
            json={"url": url, "formats": ["markdown"]},
        )
        response.raise_for_status()
        data = response.json()

        page = data.get("data") or {}
        return ScrapeResult(
            success=bool(data.get("success")),
            markdown=page.get("markdown"),
            html=page.get("html"),
        )

    def _parse_search_item(self, item: dict[str, Any]) -> EvidenceRecord | None:
        url = item.get("url")
        if not url:
            return None

        metadata = item.get("metadata") or {}
        return EvidenceRecord(
            url=url,
            title=item.get("title") or metadata.get("title"),
            markdown=item.get("markdown"),
            content=item.get("description") or item.get("content"),
        )


def _result_items(data: Any) -> list[dict[str, Any]]:
    """Normalise search payloads: {"data": [...]}, {"data": {"web": [...]}} or a list."""
    if isinstance(data, list):
        return [i for i in data if isinstance(i, dict)]
    items = data.get("data") or data.get("web") or []
    if isinstance(items, dict):
        items = items.get("web") or []
    return [i for i in items if isinstance(i, dict)]


_firecrawl_service: FirecrawlService | None = None


def get_firecrawl_service() -> FirecrawlService:
    """Get the singleton FirecrawlService instance."""
    global _firecrawl_service
    if _firecrawl_service is None:
        _firecrawl_service = FirecrawlService()
    return _firecrawl_service
