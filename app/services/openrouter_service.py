"""OpenRouter service for LLM-based structured field extraction.

This service uses the OpenAI Python SDK configured to talk to OpenRouter's
OpenAI-compatible API.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from typing import Any

from openai import AsyncOpenAI
from pydantic import ValidationError

from app.models import EnrichmentField, EnrichmentResult

logger = logging.getLogger(__name__)

OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY", "")

# OpenRouter is OpenAI-compatible; use the SDK with this base URL.
OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")

# Optional app attribution headers (recommended by OpenRouter)
OPENROUTER_SITE_URL = os.getenv("OPENROUTER_SITE_URL", "")
OPENROUTER_APP_NAME = os.getenv("OPENROUTER_APP_NAME", "")

# Model configuration
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "anthropic/claude-3.5-sonnet")
OPENROUTER_ENRICHMENT_MODEL = os.getenv("OPENROUTER_ENRICHMENT_MODEL", OPENROUTER_MODEL)

# Prompt size limits (characters)
MAX_EVIDENCE_CHARS = 24000
MAX_INSTRUCTION_CHARS = 6000


class OpenRouterService:
    """Service for LLM-based structured data extraction via OpenRouter."""

    def __init__(self, api_key: str | None = None) -> None:
        # Prefer explicit api_key, otherwise env var; strip to avoid hidden whitespace/newlines.
        self.api_key = (api_key or OPENROUTER_API_KEY or "").strip()

        default_headers: dict[str, str] = {}
        if OPENROUTER_SITE_URL:
            default_headers["HTTP-Referer"] = OPENROUTER_SITE_URL
        if OPENROUTER_APP_NAME:
            default_headers["X-Title"] = OPENROUTER_APP_NAME

        self._client: AsyncOpenAI | None = None
        self._default_headers = default_headers

    @property
    def is_configured(self) -> bool:
        """Check if the API key is configured."""
        return bool(self.api_key)

    def _get_client(self) -> AsyncOpenAI:
        """Get or create SDK client."""
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=OPENROUTER_BASE_URL,
                default_headers=self._default_headers or None,
            )
        return self._client

    async def close(self) -> None:
        """Close SDK client."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def _chat_completion(
        self,
        *,
        model: str,
        messages: list[dict[str, Any]],
        temperature: float = 0,
        response_format: dict[str, Any] | None = None,
    ) -> str | None:
        if not self.api_key:
            logger.warning("OpenRouter API key not configured")
            return None

        client = self._get_client()
        resp = await client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            response_format=response_format,
        )
        return (resp.choices[0].message.content or "").strip()

    async def extract_structured_data(
        self,
        content: str,
        fields: Sequence[EnrichmentField],
        context: dict[str, Any],
    ) -> dict[str, EnrichmentResult]:
        """Fill the requested fields from evidence text.

        Args:
            content: Evidence document (URL/Title/Content blocks).
            fields: Fields to extract.
            context: Extraction context; ``instruction`` drives the prompt.

        Returns:
            Mapping of field name to result, restricted to requested fields.
            Empty when the service is unconfigured or the response cannot
            be parsed. Transport errors from the SDK propagate.
        """
        if not fields:
            return {}

        prompt = self._build_extraction_prompt(content, fields, context)
        content_text = await self._chat_completion(
            model=OPENROUTER_ENRICHMENT_MODEL,
            messages=[{"role": "user", "content": prompt}],
            temperature=0,
            response_format={"type": "json_object"},
        )
        if not content_text:
            return {}

        try:
            data = json.loads(self._extract_json(content_text))
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse LLM response as JSON: {e}")
            return {}

        if not isinstance(data, dict):
            logger.error("LLM response is not a JSON object")
            return {}

        return self._parse_results(data, fields)

    def _parse_results(
        self,
        data: dict[str, Any],
        fields: Sequence[EnrichmentField],
    ) -> dict[str, EnrichmentResult]:
        """Convert the LLM JSON object into EnrichmentResults."""
        results: dict[str, EnrichmentResult] = {}
        for field in fields:
            raw = data.get(field.name)
            if raw is None:
                continue
            if not isinstance(raw, dict):
                raw = {"value": raw}

            source_context = raw.get("sourceContext")
            if not isinstance(source_context, list):
                source_context = []

            try:
                results[field.name] = EnrichmentResult(
                    field=field.name,
                    value=raw.get("value"),
                    confidence=_clamp_confidence(raw.get("confidence")),
                    source=raw.get("source"),
                    source_context=[s for s in source_context if isinstance(s, dict)],
                )
            except ValidationError as e:
                logger.debug(f"Rejected result for '{field.name}': {e}")
        return results

    def _build_extraction_prompt(
        self,
        content: str,
        fields: Sequence[EnrichmentField],
        context: dict[str, Any],
    ) -> str:
        """Build the prompt for field extraction."""
        instruction = self._sanitize_prompt_input(
            str(context.get("instruction") or ""), max_length=MAX_INSTRUCTION_CHARS
        )
        safe_content = self._sanitize_prompt_input(content, max_length=MAX_EVIDENCE_CHARS)
        field_lines = "\n".join(
            f'- "{f.name}": {self._sanitize_prompt_input(f.description, max_length=300)}'
            for f in fields
        )
        known = {
            key: context.get(key)
            for key in ("companyName", "companyDomain", "companyLinkedInUrl")
            if context.get(key)
        }

        return f'''{instruction}

KNOWN COMPANY CONTEXT:
{json.dumps(known, ensure_ascii=False)}

FIELDS TO EXTRACT:
{field_lines}

OUTPUT JSON (return ONLY this JSON object, no markdown). One key per field name:
{{
  "<field name>": {{
    "value": "extracted value, or null if not explicitly stated",
    "confidence": 0.9,
    "source": "URL the value was found at",
    "sourceContext": [{{"url": "https://...", "snippet": "supporting text"}}]
  }}
}}

RULES:
- Use null for any field the evidence does not state explicitly
- Never invent names, titles or URLs
- Confidence is 0.0-1.0 based on source quality

EVIDENCE:
{safe_content}

Return ONLY valid JSON, no other text or markdown.'''

    def _sanitize_prompt_input(self, text: str, max_length: int) -> str:
        """Strip control characters and truncate prompt input."""
        cleaned = "".join(c for c in text if c.isprintable() or c in "\n\t")
        return cleaned[:max_length]

    def _extract_json(self, text: str) -> str:
        """Extract JSON from response, handling markdown code blocks."""
        text = text.strip()
        if text.startswith("```"):
            lines = text.split("\n")
            lines = [line for line in lines if not line.startswith("```")]
            text = "\n".join(lines)
        return text.strip()


def _clamp_confidence(value: Any) -> float:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return 0.0
    return max(0.0, min(1.0, float(value)))


_openrouter_service: OpenRouterService | None = None


def get_openrouter_service() -> OpenRouterService:
    """Get the singleton OpenRouterService instance."""
    global _openrouter_service
    if _openrouter_service is None:
        _openrouter_service = OpenRouterService()
    return _openrouter_service
