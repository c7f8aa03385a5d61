"""Evidence collection: run search queries and fetch leadership pages."""

import logging
from collections.abc import Sequence

from app.log_utils import sanitize_for_log
from app.models import EvidenceRecord
from app.services.agent_tools import MARKDOWN_FORMATS, ScrapeFn, SearchFn

logger = logging.getLogger(__name__)

# Results requested per discovery query
RESULTS_PER_QUERY = 3

# Company pages tried, in order, when executive evidence is needed
LEADERSHIP_PATHS: tuple[str, ...] = ("/about", "/team", "/leadership")

LEADERSHIP_PAGE_TITLE = "Company Leadership Page"


class EvidenceCollector:
    """Executes queries sequentially so evidence keeps query order."""

    def __init__(self, search: SearchFn, scrape: ScrapeFn) -> None:
        self._search = search
        self._scrape = scrape

    async def collect(
        self,
        queries: Sequence[str],
        company_domain: str | None = None,
        needs_executive_evidence: bool = False,
    ) -> list[EvidenceRecord]:
        """Collect evidence for all queries.

        A failing query or page fetch is logged and skipped; it never aborts
        the batch.

        Args:
            queries: Queries in priority order.
            company_domain: Company domain used for direct page fetches.
            needs_executive_evidence: Whether to fetch a leadership page.

        Returns:
            Search results in query order, followed by at most one
            leadership page record.
        """
        records: list[EvidenceRecord] = []

        for query in queries:
            safe_query = sanitize_for_log(query, max_length=200)
            try:
                logger.info(f"Searching: {safe_query}")
                results = await self._search(
                    query,
                    limit=RESULTS_PER_QUERY,
                    formats=MARKDOWN_FORMATS,
                )
            except Exception as e:
                logger.warning(f"Search failed for query {safe_query!r}: {e}")
                continue

            if results:
                logger.info(f"Found {len(results)} results")
                records.extend(results)

        if company_domain and needs_executive_evidence:
            page = await self.fetch_leadership_page(company_domain)
            if page:
                records.append(page)

        return records

    async def fetch_leadership_page(self, company_domain: str) -> EvidenceRecord | None:
        """Fetch the first of /about, /team, /leadership with usable content."""
        logger.info("Scraping company website for executive info")
        base_url = company_domain.rstrip("/")
        if not base_url.startswith(("http://", "https://")):
            base_url = f"https://{base_url}"

        for path in LEADERSHIP_PATHS:
            url = f"{base_url}{path}"
            try:
                scraped = await self._scrape(url)
                usable = bool(scraped.success and scraped.markdown)
            except Exception as e:
                logger.warning(f"Failed to scrape {url}: {e}")
                continue

            if usable:
                logger.info(f"Successfully scraped {url}")
                return EvidenceRecord(
                    url=url,
                    title=LEADERSHIP_PAGE_TITLE,
                    markdown=scraped.markdown,
                    content=scraped.markdown,
                )
            logger.debug(f"No usable content at {url}")

        return None
