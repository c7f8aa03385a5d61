"""Build the extraction context and hand evidence to the extraction engine."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from app.models import EnrichmentContext, EnrichmentField, EnrichmentResult
from app.services.agent_tools import ExtractFn

logger = logging.getLogger(__name__)


def build_instruction(
    company_name: str | None,
    company_domain: str | None,
    anchor_url: str | None,
) -> str:
    """Natural-language verification policy given to the extraction engine."""
    target = company_name or company_domain
    return f"""Extract the requested information about {target}.

LINKEDIN-FIRST VERIFICATION: the company LinkedIn page is the foundation.

Phase 1: Company LinkedIn page
- Company LinkedIn page: {anchor_url or "Not found"}
- When present, treat it as the authoritative source for who works at the company
- It lists current employees with their exact titles

Phase 2: Individual LinkedIn profiles
- Use profiles (linkedin.com/in) that show "Current" employment at {company_name}
- Record the full name, current job title and profile URL
- Skip profiles that do not clearly show current employment

Phase 3: Cross-referencing
- Compare LinkedIn data with the company website
- When sources disagree, a LinkedIn profile marked "Current" wins
- Titles must match the requested role exactly

Executive extraction rules:
1. CURRENT EMPLOYEES ONLY: past roles do not count
2. EXACT TITLE MATCH: a CEO must be listed as "CEO" or "Chief Executive Officer"
3. INCLUDE PROFILE URLS: add the LinkedIn profile URL whenever one is found
4. PREFER THE COMPANY PAGE: people listed on the company LinkedIn page are most reliable

Custom decision-maker roles:
- Look for LinkedIn profiles with the exact role title at {company_name}
- Confirm current employment and include the role description and profile URL

Phase 4: Quality bar
- If no current decision makers are found, say "No current decision makers found"
- Do not guess or infer
- Only report information that is explicitly stated, with its source"""


def build_context(
    company_name: str | None,
    company_domain: str | None,
    anchor_url: str | None,
    caller_context: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Assemble the extraction context.

    Built-in keys are set first and the caller context is spread on top, so
    caller values win on key collisions.
    """
    built_in = EnrichmentContext(
        company_name=company_name,
        company_domain=company_domain,
        target_domain=company_domain,
        company_linked_in_url=anchor_url,
        instruction=build_instruction(company_name, company_domain, anchor_url),
    )
    return {**built_in.model_dump(by_alias=True), **(caller_context or {})}


def keep_found_values(
    results: Mapping[str, EnrichmentResult | None],
) -> dict[str, EnrichmentResult]:
    """Drop entries without a truthy value."""
    return {
        name: result
        for name, result in results.items()
        if result is not None and result.value
    }


class ExtractionDispatcher:
    """Invokes the extraction engine and filters its output."""

    def __init__(self, extract: ExtractFn) -> None:
        self._extract = extract

    async def extract(
        self,
        evidence_text: str,
        fields: Sequence[EnrichmentField],
        context: dict[str, Any],
    ) -> dict[str, EnrichmentResult]:
        """Run extraction and return only fields with a non-empty value.

        Engine errors propagate to the caller.
        """
        raw_results = await self._extract(evidence_text, fields, context)
        results = keep_found_values(raw_results or {})
        logger.info(f"Extracted {len(results)} fields")
        return results
