"""LinkedIn-first decision-maker discovery.

Pipeline:
1. Find the company's LinkedIn page (anchor)
2. Build tiered search queries around it
3. Run the queries and fetch a leadership page from the company site
4. Rank and deduplicate the evidence, LinkedIn first
5. Hand the evidence to the extraction engine

``execute`` never raises: failures collapse to whatever results were found.
"""

import logging
from collections.abc import Sequence

from app.log_utils import sanitize_for_log
from app.models import DiscoveryContext, EnrichmentField, EnrichmentResult
from app.services.agent_tools import AgentTools
from app.services.anchor_resolver import AnchorResolver
from app.services.evidence_collector import EvidenceCollector
from app.services.evidence_ranker import is_network_hosted, rank, serialize
from app.services.extraction_dispatcher import ExtractionDispatcher, build_context
from app.services.field_classifier import has_executive_fields
from app.services.query_synthesizer import build_queries

logger = logging.getLogger(__name__)


class DecisionMakerAgent:
    """Discovers company decision makers and other company facts."""

    name = "decision-maker-agent"
    description = (
        "Finds company decision makers (CEO, founders, C-level) and other "
        "miscellaneous company fields using LinkedIn-first web search."
    )

    def __init__(self, tools: AgentTools) -> None:
        self.tools = tools
        self._anchor_resolver = AnchorResolver(tools.search)
        self._collector = EvidenceCollector(tools.search, tools.scrape)
        self._dispatcher = ExtractionDispatcher(tools.extract_structured_data)

    async def execute(
        self,
        context: DiscoveryContext,
        fields: Sequence[EnrichmentField],
    ) -> dict[str, EnrichmentResult]:
        """Enrich the requested fields for the company described by ``context``.

        Args:
            context: Caller context carrying the company name and/or domain.
            fields: Fields to fill in.

        Returns:
            Mapping of field name to result, containing only fields with a
            non-empty value. Missing fields mean "not found".
        """
        company_name = context.resolved_company_name()
        company_domain = context.resolved_company_domain()

        logger.info(f"Company name: {sanitize_for_log(company_name)}")
        logger.info(f"Company domain: {sanitize_for_log(company_domain)}")
        logger.info(f"Fields to enrich: {', '.join(f.name for f in fields)}")

        if not company_name and not company_domain:
            logger.info("No company name or domain available, skipping discovery")
            return {}

        results: dict[str, EnrichmentResult] = {}

        try:
            anchor_url: str | None = None
            if company_name:
                logger.info(
                    f"Phase 1: Finding company LinkedIn page for {sanitize_for_log(company_name)}"
                )
                anchor_url = await self._anchor_resolver.find_anchor_profile(
                    company_name, company_domain
                )
                if not anchor_url:
                    logger.info("Company LinkedIn not found, falling back to general search")

            queries = build_queries(fields, company_name, company_domain, anchor_url)
            logger.info(f"Phase 2: Built {len(queries)} search queries")

            evidence = await self._collector.collect(
                queries,
                company_domain=company_domain,
                needs_executive_evidence=has_executive_fields(fields),
            )

            ranked = rank(evidence, company_domain)
            logger.info(
                f"Total unique results: {len(ranked)} "
                f"(LinkedIn: {sum(1 for r in ranked if is_network_hosted(r))})"
            )
            if not ranked:
                logger.info("No search results found")
                return {}

            enrichment_context = build_context(
                company_name,
                company_domain,
                anchor_url,
                context.as_extraction_context(),
            )
            extracted = await self._dispatcher.extract(
                serialize(ranked), fields, enrichment_context
            )
            results.update(extracted)
        except Exception:
            logger.exception("Error during decision-maker discovery")

        return results


def build_default_tools() -> AgentTools:
    """Wire the configured providers into an ``AgentTools`` bundle.

    Firecrawl provides search. Pages are fetched through Firecrawl when it is
    configured, otherwise directly over HTTP.
    """
    from app.services.firecrawl_service import get_firecrawl_service
    from app.services.openrouter_service import get_openrouter_service
    from app.services.website_fetcher_service import get_website_fetcher

    firecrawl = get_firecrawl_service()
    scrape = firecrawl.scrape if firecrawl.is_configured else get_website_fetcher().scrape

    return AgentTools(
        search=firecrawl.search,
        scrape=scrape,
        extract_structured_data=get_openrouter_service().extract_structured_data,
    )


_decision_maker_agent: DecisionMakerAgent | None = None


def get_decision_maker_agent() -> DecisionMakerAgent:
    """Get the singleton DecisionMakerAgent wired to the default providers."""
    global _decision_maker_agent
    if _decision_maker_agent is None:
        _decision_maker_agent = DecisionMakerAgent(build_default_tools())
    return _decision_maker_agent
