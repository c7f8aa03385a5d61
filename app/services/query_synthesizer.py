"""Search query synthesis for decision-maker discovery.

Queries are emitted in trust order, from anchor-scoped LinkedIn profile
searches down to open-web mentions. Callers rely on this order: evidence
collected from earlier queries wins ties during ranking.
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from urllib.parse import urlparse

from app.models import EnrichmentField
from app.services.field_classifier import (
    canonical_title,
    is_executive_field,
    search_terms,
)

LINKEDIN_PROFILE_SITE = "site:linkedin.com/in"
LINKEDIN_COMPANY_SITE = "site:linkedin.com/company"


def anchor_company_name(anchor_url: str) -> str:
    """Derive a company name from a LinkedIn company page URL.

    ``https://www.linkedin.com/company/acme-corp`` -> ``"acme corp"``.
    Returns an empty string when the URL is not a company page.
    """
    try:
        path = urlparse(anchor_url).path
    except ValueError:
        return ""

    parts = [part for part in path.split("/") if part]
    if len(parts) >= 2 and parts[0] == "company":
        return parts[1].replace("-", " ")
    return ""


def executive_titles(fields: Sequence[EnrichmentField]) -> list[str]:
    """Canonical titles for the executive fields, deduplicated in input order."""
    titles: list[str] = []
    for field in fields:
        if not is_executive_field(field):
            continue
        title = canonical_title(field)
        if title and title not in titles:
            titles.append(title)
    return titles


def build_queries(
    fields: Sequence[EnrichmentField],
    company_name: str | None = None,
    company_domain: str | None = None,
    anchor_url: str | None = None,
    current_year: int | None = None,
) -> list[str]:
    """Build the ordered list of search queries.

    Args:
        fields: Requested fields, in caller order.
        company_name: Company name, if known.
        company_domain: Company website domain, if known.
        anchor_url: LinkedIn company page found by the anchor resolver.
        current_year: Recency marker for the open-web query. Defaults to
            the current UTC year.

    Returns:
        Queries ordered from most to least trusted.
    """
    queries: list[str] = []
    titles = executive_titles(fields)
    other_fields = [f for f in fields if not is_executive_field(f)]

    if titles:
        or_titles = " OR ".join(titles)

        # Tier 1: scoped by the anchor page
        if anchor_url:
            anchor_name = anchor_company_name(anchor_url)
            queries.append(f'{LINKEDIN_PROFILE_SITE} "{anchor_name}" {or_titles}')
            if company_name:
                queries.append(f'{LINKEDIN_PROFILE_SITE} "{company_name}" {or_titles}')

        # Tier 2: individual profiles by company name
        if company_name:
            for title in titles:
                queries.append(
                    f'{LINKEDIN_PROFILE_SITE} "{title}" "{company_name}" current'
                )
            queries.append(f'{LINKEDIN_PROFILE_SITE} "{company_name}" leadership team')
            queries.append(f'{LINKEDIN_PROFILE_SITE} "{company_name}" executives')

        # Tier 3: company website
        if company_domain:
            queries.append(f"site:{company_domain} team leadership about executives")
            queries.append(f"site:{company_domain} about-us")

        # Tier 4: open web, last resort
        if company_name:
            year = current_year or datetime.now(timezone.utc).year
            queries.append(f'"{company_name}" {" ".join(titles)} {year}')

    for field in other_fields:
        terms = search_terms(field)
        if company_name:
            queries.append(f'"{company_name}" {terms}')
        if company_domain:
            queries.append(f"site:{company_domain} {terms}")

    return queries


def build_anchor_query(company_name: str) -> str:
    """Query used to locate the company's LinkedIn page."""
    return f'{LINKEDIN_COMPANY_SITE} "{company_name}"'
