"""Enrichment router for decision-maker discovery.

Provides the endpoint that runs LinkedIn-first discovery for a company and
returns the fields that could be filled from evidence.
"""

import logging

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field

from app.models import DiscoveryContext, EnrichmentField, EnrichmentResult, to_camel
from app.services import get_decision_maker_agent, get_firecrawl_service, get_openrouter_service

logger = logging.getLogger(__name__)

router = APIRouter()


class EnrichmentRequest(BaseModel):
    """Request model for decision-maker enrichment.

    Attributes:
        context: Company identity hints (name, discovered data, email context).
        fields: Fields to fill in.
    """

    context: DiscoveryContext = Field(default_factory=DiscoveryContext)
    fields: list[EnrichmentField] = Field(..., min_length=1, max_length=50)


class EnrichmentResponse(BaseModel):
    """Response model for enrichment results.

    Attributes:
        results: Field name to result, only for fields that were found.
        total: Number of fields found.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    results: dict[str, EnrichmentResult] = Field(default_factory=dict)
    total: int = 0


@router.post(
    "/enrich",
    response_model=EnrichmentResponse,
    status_code=status.HTTP_200_OK,
    summary="Discover decision makers",
    description="Find company decision makers and other requested fields from web evidence.",
)
async def enrich_fields(request: EnrichmentRequest) -> EnrichmentResponse:
    """Run decision-maker discovery for the requested fields.

    Fields missing from the response were not found; the endpoint does not
    report discovery failures as errors.

    Args:
        request: Enrichment request with company context and fields.

    Returns:
        EnrichmentResponse with the fields that were found.
    """
    agent = get_decision_maker_agent()
    results = await agent.execute(request.context, request.fields)
    logger.info(f"Returning {len(results)} enriched fields")
    return EnrichmentResponse(results=results, total=len(results))


@router.get(
    "/enrich/status",
    response_model=dict,
    status_code=status.HTTP_200_OK,
    summary="Get enrichment provider status",
    description="Check which discovery providers are configured.",
)
async def get_enrichment_status() -> dict:
    """Get the current status of the discovery providers."""
    firecrawl = get_firecrawl_service()
    openrouter = get_openrouter_service()

    return {
        "configured": firecrawl.is_configured and openrouter.is_configured,
        "firecrawl": firecrawl.is_configured,
        "openrouter": openrouter.is_configured,
    }
