"""Tests for OpenRouter structured field extraction."""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from app.models import EnrichmentField
from app.services.openrouter_service import (
    MAX_EVIDENCE_CHARS,
    OpenRouterService,
    get_openrouter_service,
)

FIELDS = [
    EnrichmentField(name="ceo", description="Chief Executive Officer"),
    EnrichmentField(name="founder", description="Company founder"),
]

CONTEXT = {
    "companyName": "Acme Corp",
    "companyDomain": "acme.com",
    "companyLinkedInUrl": "https://linkedin.com/company/acme-corp",
    "instruction": "Extract the requested information about Acme Corp.",
}


class TestConfiguration:
    def test_is_configured(self):
        assert OpenRouterService(api_key="or-key").is_configured is True

    def test_unconfigured(self):
        service = OpenRouterService(api_key="temp")
        service.api_key = ""
        assert service.is_configured is False

    def test_singleton(self):
        assert get_openrouter_service() is get_openrouter_service()


class TestExtractStructuredData:
    """Test extract_structured_data()."""

    @pytest.mark.asyncio
    async def test_parses_requested_fields(self):
        service = OpenRouterService(api_key="test")
        response = {
            "ceo": {
                "value": "Jane Doe",
                "confidence": 0.92,
                "source": "https://linkedin.com/in/jane-doe",
                "sourceContext": [{"url": "https://linkedin.com/in/jane-doe", "snippet": "CEO"}, "junk"],
            },
            "founder": {"value": None},
            "unrequested": {"value": "ignored"},
        }
        with patch.object(service, "_chat_completion", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = json.dumps(response)
            results = await service.extract_structured_data("evidence", FIELDS, CONTEXT)

        assert set(results) == {"ceo", "founder"}
        assert results["ceo"].value == "Jane Doe"
        assert results["ceo"].confidence == 0.92
        assert results["ceo"].source == "https://linkedin.com/in/jane-doe"
        assert results["ceo"].source_context == [
            {"url": "https://linkedin.com/in/jane-doe", "snippet": "CEO"}
        ]
        assert results["founder"].value is None

        kwargs = mock_chat.await_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["temperature"] == 0

    @pytest.mark.asyncio
    async def test_scalar_values_wrapped(self):
        service = OpenRouterService(api_key="test")
        with patch.object(service, "_chat_completion", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = '```json\n{"ceo": "Jane Doe"}\n```'
            results = await service.extract_structured_data("evidence", FIELDS, CONTEXT)

        assert results["ceo"].value == "Jane Doe"
        assert results["ceo"].confidence == 0.0

    @pytest.mark.asyncio
    async def test_confidence_clamped(self):
        service = OpenRouterService(api_key="test")
        with patch.object(service, "_chat_completion", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = json.dumps(
                {"ceo": {"value": "A", "confidence": 7}, "founder": {"value": "B", "confidence": "high"}}
            )
            results = await service.extract_structured_data("evidence", FIELDS, CONTEXT)

        assert results["ceo"].confidence == 1.0
        assert results["founder"].confidence == 0.0

    @pytest.mark.asyncio
    async def test_malformed_source_context_keeps_other_fields(self):
        """A non-list sourceContext is dropped without losing any field."""
        service = OpenRouterService(api_key="test")
        with patch.object(service, "_chat_completion", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = json.dumps(
                {"founder": {"value": "Jane Doe"}, "ceo": {"value": "Bob", "sourceContext": 5}}
            )
            results = await service.extract_structured_data("evidence", FIELDS, CONTEXT)

        assert results["founder"].value == "Jane Doe"
        assert results["ceo"].value == "Bob"
        assert results["ceo"].source_context == []

    @pytest.mark.asyncio
    async def test_invalid_json_returns_empty(self):
        service = OpenRouterService(api_key="test")
        with patch.object(service, "_chat_completion", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = "not json"
            assert await service.extract_structured_data("evidence", FIELDS, CONTEXT) == {}

    @pytest.mark.asyncio
    async def test_non_object_json_returns_empty(self):
        service = OpenRouterService(api_key="test")
        with patch.object(service, "_chat_completion", new_callable=AsyncMock) as mock_chat:
            mock_chat.return_value = "[1, 2]"
            assert await service.extract_structured_data("evidence", FIELDS, CONTEXT) == {}

    @pytest.mark.asyncio
    async def test_unconfigured_returns_empty(self):
        service = OpenRouterService(api_key="temp")
        service.api_key = ""
        assert await service.extract_structured_data("evidence", FIELDS, CONTEXT) == {}

    @pytest.mark.asyncio
    async def test_no_fields(self):
        service = OpenRouterService(api_key="test")
        with patch.object(service, "_chat_completion", new_callable=AsyncMock) as mock_chat:
            assert await service.extract_structured_data("evidence", [], CONTEXT) == {}
            mock_chat.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sdk_call(self):
        """The SDK is called with the enrichment model and the prompt."""
        service = OpenRouterService(api_key="test")
        completion = MagicMock()
        completion.choices = [MagicMock(message=MagicMock(content=' {"ceo": {"value": "Jane"}} '))]
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=completion)

        with patch.object(service, "_get_client", return_value=client):
            results = await service.extract_structured_data("evidence", FIELDS, CONTEXT)

        assert results["ceo"].value == "Jane"
        messages = client.chat.completions.create.await_args.kwargs["messages"]
        assert "EVIDENCE:\nevidence" in messages[0]["content"]


class TestBuildExtractionPrompt:
    """Test _build_extraction_prompt()."""

    def setup_method(self):
        self.service = OpenRouterService(api_key="test")

    def test_includes_instruction_fields_and_context(self):
        prompt = self.service._build_extraction_prompt("evidence text", FIELDS, CONTEXT)
        assert prompt.startswith("Extract the requested information about Acme Corp.")
        assert '- "ceo": Chief Executive Officer' in prompt
        assert '- "founder": Company founder' in prompt
        assert '"companyLinkedInUrl": "https://linkedin.com/company/acme-corp"' in prompt
        assert prompt.rstrip().endswith("Return ONLY valid JSON, no other text or markdown.")

    def test_evidence_truncated(self):
        prompt = self.service._build_extraction_prompt("x" * (MAX_EVIDENCE_CHARS + 500), FIELDS, CONTEXT)
        assert "x" * MAX_EVIDENCE_CHARS in prompt
        assert "x" * (MAX_EVIDENCE_CHARS + 1) not in prompt

    def test_control_characters_removed(self):
        assert self.service._sanitize_prompt_input("a\x00b\nc", max_length=10) == "ab\nc"


class TestExtractJson:
    def test_strips_code_fence(self):
        service = OpenRouterService(api_key="test")
        assert service._extract_json('```json\n{"a": 1}\n```') == '{"a": 1}'
