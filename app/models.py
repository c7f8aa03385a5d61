"""Pydantic models for the Decision-Maker Discovery service.

Models describe the requested enrichment fields, the caller context, the
evidence records collected from search/scrape providers, and the per-field
results returned by the extraction engine.
"""

from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(word.capitalize() for word in components[1:])


class FieldClass(Enum):
    """Category of a requested field."""

    EXECUTIVE = "executive"
    OTHER = "other"


class TrustTier(IntEnum):
    """Ranking bucket for evidence records. Lower sorts first."""

    PROFESSIONAL_NETWORK = 0
    COMPANY_SITE = 1
    GENERAL_WEB = 2


class EnrichmentField(BaseModel):
    """A data field the caller wants filled in.

    Attributes:
        name: Field identifier (e.g., "ceo", "founder", "headquarters").
        description: Free-text description used for classification and
            search term generation.

    Extra caller-defined metadata is accepted and carried through untouched.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)


class EvidenceRecord(BaseModel):
    """One retrieved web result or page fetch."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: str | None = None
    markdown: str | None = None
    content: str | None = None


class ScrapeResult(BaseModel):
    """Result of fetching a single page."""

    success: bool = False
    markdown: str | None = None
    html: str | None = None


class EmailContext(BaseModel):
    """Company hints derived from an email address."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    company_domain: str | None = None
    company_name_guess: str | None = None


class DiscoveryContext(BaseModel):
    """Caller context for a discovery run.

    Company name precedence is: explicit ``companyName``, then
    ``discoveredData.companyName``, then ``emailContext.companyNameGuess``.
    Unknown keys are kept so they can be forwarded to the extraction engine.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
        extra="allow",
    )

    company_name: str | None = None
    discovered_data: dict[str, Any] = Field(default_factory=dict)
    email_context: EmailContext | None = None

    def resolved_company_name(self) -> str | None:
        """Resolve the company name using the documented precedence."""
        if self.company_name:
            return self.company_name
        discovered = self.discovered_data.get("companyName")
        if discovered:
            return str(discovered)
        if self.email_context and self.email_context.company_name_guess:
            return self.email_context.company_name_guess
        return None

    def resolved_company_domain(self) -> str | None:
        if self.email_context and self.email_context.company_domain:
            return self.email_context.company_domain
        return None

    def as_extraction_context(self) -> dict[str, Any]:
        """Dump the caller context with camelCase keys, omitting unset values."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude_defaults=True)


class EnrichmentResult(BaseModel):
    """Value found for one field by the extraction engine."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    field: str
    value: Any = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    source: str | None = None
    source_context: list[dict[str, Any]] = Field(default_factory=list)


class EnrichmentContext(BaseModel):
    """Context handed to the extraction engine alongside the evidence text."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    company_name: str | None = None
    company_domain: str | None = None
    target_domain: str | None = None
    company_linked_in_url: str | None = Field(
        default=None, alias="companyLinkedInUrl"
    )
    instruction: str
