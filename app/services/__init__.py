"""Services package for Decision-Maker Discovery."""

from app.services.decision_maker_agent import (
    DecisionMakerAgent,
    build_default_tools,
    get_decision_maker_agent,
)
from app.services.firecrawl_service import FirecrawlService, get_firecrawl_service
from app.services.openrouter_service import OpenRouterService, get_openrouter_service
from app.services.website_fetcher_service import (
    WebsiteFetcherService,
    get_website_fetcher,
)

__all__ = [
    "DecisionMakerAgent",
    "build_default_tools",
    "get_decision_maker_agent",
    "FirecrawlService",
    "get_firecrawl_service",
    "OpenRouterService",
    "get_openrouter_service",
    "WebsiteFetcherService",
    "get_website_fetcher",
]
