"""Pytest fixtures for Decision-Maker Discovery tests.

This module provides shared fixtures for testing the FastAPI application and
the discovery pipeline, including fake collaborator tools and sample data.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from app.main import app
from app.models import EnrichmentField, EvidenceRecord, ScrapeResult
from app.services.agent_tools import AgentTools


@pytest.fixture
def client():
    """Create a test client for the FastAPI application.

    Returns:
        TestClient: A test client instance for making requests to the API.
    """
    return TestClient(app)


@pytest.fixture
def ceo_field():
    """A single executive field."""
    return EnrichmentField(name="ceo", description="Chief Executive Officer")


@pytest.fixture
def sample_fields():
    """Mixed executive and non-executive fields."""
    return [
        EnrichmentField(name="ceo", description="Chief Executive Officer"),
        EnrichmentField(name="founder", description="Company founder(s)"),
        EnrichmentField(name="headquarters", description="Where is the company headquartered city"),
    ]


@pytest.fixture
def anchor_url():
    return "https://linkedin.com/company/acme-corp"


@pytest.fixture
def mock_tools():
    """AgentTools bundle backed by AsyncMocks.

    Search returns no results, scrape fails softly and extraction returns
    nothing unless a test configures them.
    """
    return AgentTools(
        search=AsyncMock(return_value=[]),
        scrape=AsyncMock(return_value=ScrapeResult(success=False)),
        extract_structured_data=AsyncMock(return_value={}),
    )


@pytest.fixture
def make_record():
    """Factory for EvidenceRecords with a default markdown body."""

    def _make(url: str, title: str | None = None, markdown: str | None = None) -> EvidenceRecord:
        body = markdown if markdown is not None else f"content of {url}"
        return EvidenceRecord(url=url, title=title, markdown=body)

    return _make
