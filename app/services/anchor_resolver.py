"""Locate a company's official LinkedIn company page.

The page found here is the anchor for discovery: its slug scopes the first,
highest-trust profile queries.
"""

import logging
import re

from app.log_utils import sanitize_for_log
from app.services.agent_tools import MARKDOWN_FORMATS, SearchFn
from app.services.query_synthesizer import build_anchor_query

logger = logging.getLogger(__name__)

LINKEDIN_COMPANY_NAMESPACE = "linkedin.com/company"

# Number of candidate pages requested from the search provider
ANCHOR_SEARCH_LIMIT = 5


def _company_slug(company_name: str) -> str:
    return re.sub(r"\s+", "-", company_name.lower())


class AnchorResolver:
    """Finds the company's LinkedIn page with a single search."""

    def __init__(self, search: SearchFn) -> None:
        self._search = search

    async def find_anchor_profile(
        self,
        company_name: str,
        company_domain: str | None = None,
    ) -> str | None:
        """Return the URL of the company's LinkedIn page, or None.

        Search relevance order is trusted as the tie-break: the first result
        whose URL carries the hyphenated company name wins, otherwise the
        first LinkedIn company page of any name. Search errors are logged and
        treated as not found.
        """
        safe_name = sanitize_for_log(company_name)
        try:
            query = build_anchor_query(company_name)
            logger.info(f"LinkedIn company search query: {sanitize_for_log(query)}")

            results = await self._search(
                query,
                limit=ANCHOR_SEARCH_LIMIT,
                formats=MARKDOWN_FORMATS,
            )
            if not results:
                logger.info(f"No LinkedIn company page found for {safe_name}")
                return None

            slug = _company_slug(company_name)
            company_pages = [
                r.url
                for r in results
                if LINKEDIN_COMPANY_NAMESPACE in r.url and slug in r.url.lower()
            ]
            if company_pages:
                logger.info(f"Found company LinkedIn: {company_pages[0]}")
                return company_pages[0]

            fallback = next(
                (r.url for r in results if LINKEDIN_COMPANY_NAMESPACE in r.url),
                None,
            )
            if fallback:
                logger.info(f"Using fallback company LinkedIn: {fallback}")
                return fallback

            logger.info("No suitable company LinkedIn page found")
            return None
        except Exception as e:
            logger.warning(f"Error finding company LinkedIn page for {safe_name}: {e}")
            return None
