"""Collaborator contracts consumed by the decision-maker agent.

The agent never talks to a provider directly. It receives an ``AgentTools``
bundle of three async callables: search, scrape and structured extraction.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from app.models import EnrichmentField, EnrichmentResult, EvidenceRecord, ScrapeResult

# Search options used throughout discovery
MARKDOWN_FORMATS: tuple[str, ...] = ("markdown",)


class SearchFn(Protocol):
    async def __call__(
        self,
        query: str,
        *,
        limit: int,
        formats: Sequence[str],
    ) -> list[EvidenceRecord]: ...


class ScrapeFn(Protocol):
    async def __call__(self, url: str) -> ScrapeResult: ...


class ExtractFn(Protocol):
    async def __call__(
        self,
        content: str,
        fields: Sequence[EnrichmentField],
        context: dict[str, Any],
    ) -> dict[str, EnrichmentResult]: ...


@dataclass(frozen=True)
class AgentTools:
    """External capabilities provided by the host."""

    search: SearchFn
    scrape: ScrapeFn
    extract_structured_data: ExtractFn
