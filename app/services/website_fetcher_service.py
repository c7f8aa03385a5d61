"""Direct website fetcher used when no scraping provider is configured."""

import logging
import re

import httpx
from bs4 import BeautifulSoup

from app.models import ScrapeResult

logger = logging.getLogger(__name__)

# Timeout for HTTP requests (seconds)
REQUEST_TIMEOUT = 10.0

# Minimum content length to consider page valid (bytes)
MIN_CONTENT_LENGTH = 1000

# Elements that never carry page content
NOISE_TAGS = ["script", "style", "noscript", "svg", "nav", "footer", "header", "form"]

HEADING_TAGS = {"h1": "#", "h2": "##", "h3": "###", "h4": "####"}


class WebsiteFetcherService:
    """Fetches a page over HTTP and renders its text as markdown."""

    def __init__(self) -> None:
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=REQUEST_TIMEOUT,
                follow_redirects=True,
                headers={
                    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36",
                    "Accept": "text/html,application/xhtml+xml",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def scrape(self, url: str) -> ScrapeResult:
        """Fetch a page and convert it to markdown.

        Args:
            url: Absolute page URL.

        Returns:
            ScrapeResult with ``success=False`` for pages too short to be
            useful.

        Raises:
            httpx.HTTPError: If the request fails or returns an error status.
        """
        client = await self._get_client()
        response = await client.get(url)
        response.raise_for_status()

        html = response.text
        if len(html) < MIN_CONTENT_LENGTH:
            logger.debug(f"Page too short at {url} ({len(html)} bytes)")
            return ScrapeResult(success=False, html=html)

        markdown = self.html_to_markdown(html)
        return ScrapeResult(success=bool(markdown), markdown=markdown or None, html=html)

    def html_to_markdown(self, html: str) -> str:
        """Render visible page text as light markdown.

        Headings become ``#`` lines, list items become ``-`` bullets and
        everything else is kept as plain paragraphs.
        """
        soup = BeautifulSoup(html, "lxml")
        for tag in soup(NOISE_TAGS):
            tag.decompose()

        body = soup.body or soup
        lines: list[str] = []
        for element in body.find_all(["h1", "h2", "h3", "h4", "p", "li"]):
            text = self._clean_text(element.get_text(separator=" ", strip=True))
            if not text:
                continue
            if element.name in HEADING_TAGS:
                lines.append(f"{HEADING_TAGS[element.name]} {text}")
            elif element.name == "li":
                lines.append(f"- {text}")
            else:
                lines.append(text)

        # Pages built from divs only
        if not lines:
            text = self._clean_text(body.get_text(separator=" ", strip=True))
            return text

        return "\n\n".join(lines)

    def _clean_text(self, text: str) -> str:
        return re.sub(r"\s+", " ", text).strip()


_website_fetcher: WebsiteFetcherService | None = None


def get_website_fetcher() -> WebsiteFetcherService:
    """Get the singleton WebsiteFetcherService instance."""
    global _website_fetcher
    if _website_fetcher is None:
        _website_fetcher = WebsiteFetcherService()
    return _website_fetcher
