# ABOUTME: Tests for the Gemini AIService.
# ABOUTME: Covers prompt assembly, grounding config, credential checks and error wrapping.

from unittest.mock import MagicMock, patch

import pytest

from brief_enricher.ai.prompts import DIRECT_OPENING, OUTPUT_CONTRACT
from brief_enricher.ai.retry import RetryPolicy
from brief_enricher.ai.service import AIService
from brief_enricher.config import Settings
from brief_enricher.context.resolver import resolve_locale_context
from brief_enricher.errors import ConfigurationError, UpstreamError, UpstreamQuotaError
from brief_enricher.models import (
    DocumentType,
    DraftNarrative,
    LocaleContext,
    LocaleFacts,
)

QUOTA_ERROR = RuntimeError("429 RESOURCE_EXHAUSTED")


@pytest.fixture
def sleeps() -> list[float]:
    """Recorded retry waits."""
    return []


@pytest.fixture
def service(mock_settings: Settings, sleeps: list[float]) -> AIService:
    """AIService with a recording sleep so retries do not wait."""
    return AIService(mock_settings, RetryPolicy.from_settings(mock_settings, sleep=sleeps.append))


class TestClient:
    """Tests for lazy client creation."""

    def test_missing_api_key_raises(self, keyless_settings: Settings) -> None:
        """Accessing the client without a key is a configuration error."""
        service = AIService(keyless_settings)

        with pytest.raises(ConfigurationError, match="GEMINI_API_KEY"):
            _ = service.client

    @patch("brief_enricher.ai.service.genai.Client")
    def test_client_created_once(self, mock_client_cls: MagicMock, service: AIService) -> None:
        """The client is created lazily and reused."""
        first = service.client
        second = service.client

        assert first is second
        mock_client_cls.assert_called_once_with(api_key="test-api-key")

    def test_grounding_tool_enabled(self, service: AIService) -> None:
        """Generation config enables Google Search grounding."""
        config = service._generate_content_config("system")

        assert config.temperature == 0.5
        assert config.tools is not None
        assert config.tools[0].google_search is not None


class TestPromptAssembly:
    """Tests for system instruction and prompt building."""

    def test_system_instruction_uses_local_time(
        self, service: AIService, locale_context: LocaleContext
    ) -> None:
        """Persona carries the local publication time and date."""
        instruction = service.build_system_instruction(locale_context)

        assert "Monday, February 2, 2026 at 7:00 AM EST" in instruction
        assert "Tribeca, New York" in instruction
        assert "DAILY update" in instruction

    def test_prompt_contains_draft_and_contract(
        self,
        service: AIService,
        locale_context: LocaleContext,
        sample_draft: DraftNarrative,
    ) -> None:
        """Prompt includes draft claims and ends with the output contract."""
        prompt = service.build_prompt(locale_context, sample_draft)

        assert "Joe's Pizza on Greenwich St may be closing" in prompt
        assert prompt.endswith(OUTPUT_CONTRACT)
        assert '"link_candidates"' in prompt

    def test_prompt_blocked_and_urban_notes(
        self,
        service: AIService,
        locale_context: LocaleContext,
        sample_draft: DraftNarrative,
    ) -> None:
        """Blocked domains and the urban note are included for Tribeca."""
        prompt = service.build_prompt(locale_context, sample_draft)

        assert "Do NOT include sources from: tribecacitizen.com" in prompt
        assert "URBAN CONTEXT: New York" in prompt
        assert "Good morning, Tribeca." in prompt

    def test_daily_brief_includes_continuity(
        self,
        service: AIService,
        locale_context: LocaleContext,
        sample_draft: DraftNarrative,
    ) -> None:
        """Daily briefs get prior coverage as background."""
        prompt = service.build_prompt(locale_context, sample_draft)

        assert "RECENT COVERAGE CONTEXT" in prompt
        assert '- Sunday, February 1: "Hudson Street gets a new bike lane"' in prompt
        assert "Summary: The city finished the Hudson Street lane." in prompt
        assert '[new opening] "Bakery opens on Franklin"' in prompt

    def test_weekly_recap_skips_continuity(
        self,
        service: AIService,
        locale_facts: LocaleFacts,
        mock_settings: Settings,
        sample_draft: DraftNarrative,
    ) -> None:
        """Other document types never see prior coverage and use a direct opening."""
        context = resolve_locale_context(
            locale_facts, DocumentType.WEEKLY_RECAP, settings=mock_settings
        )

        prompt = service.build_prompt(context, sample_draft)

        assert "RECENT COVERAGE CONTEXT" not in prompt
        assert DIRECT_OPENING in prompt

    def test_no_prior_coverage(
        self, service: AIService, locale_context: LocaleContext
    ) -> None:
        """An empty prior coverage list adds no continuity block."""
        prompt = service.build_prompt(locale_context, DraftNarrative(content="- a rumor"))

        assert "RECENT COVERAGE CONTEXT" not in prompt


class TestGenerateGrounded:
    """Tests for the grounded generation call."""

    def test_streams_and_concatenates(
        self,
        service: AIService,
        locale_context: LocaleContext,
        sample_draft: DraftNarrative,
        mock_genai_client: MagicMock,
        raw_response: str,
    ) -> None:
        """Streamed chunks are joined into the raw response."""
        service._client = mock_genai_client

        result = service.generate_grounded(locale_context, sample_draft)

        assert result == raw_response
        call = mock_genai_client.models.generate_content_stream.call_args
        assert call.kwargs["model"] == "gemini-test"

    def test_model_override(
        self,
        service: AIService,
        locale_context: LocaleContext,
        sample_draft: DraftNarrative,
    ) -> None:
        """An explicit model is passed to the backend."""
        service._client = MagicMock()
        with patch.object(AIService, "_generate", return_value="raw") as mock_generate:
            service.generate_grounded(locale_context, sample_draft, model="gemini-other")

        assert mock_generate.call_args.args[2] == "gemini-other"

    def test_missing_key_makes_no_request(
        self,
        keyless_settings: Settings,
        locale_context: LocaleContext,
        sample_draft: DraftNarrative,
    ) -> None:
        """ConfigurationError is raised before any request is attempted."""
        service = AIService(keyless_settings)

        with patch.object(AIService, "_generate") as mock_generate:
            with pytest.raises(ConfigurationError):
                service.generate_grounded(locale_context, sample_draft)

        mock_generate.assert_not_called()

    def test_quota_errors_retried(
        self,
        service: AIService,
        sleeps: list[float],
        locale_context: LocaleContext,
        sample_draft: DraftNarrative,
    ) -> None:
        """Quota errors are retried on the configured schedule."""
        service._client = MagicMock()
        side_effect = [QUOTA_ERROR, QUOTA_ERROR, "raw"]

        with patch.object(AIService, "_generate", side_effect=side_effect) as mock_generate:
            result = service.generate_grounded(locale_context, sample_draft)

        assert result == "raw"
        assert mock_generate.call_count == 3
        assert sleeps == [2.0, 5.0]

    def test_quota_exhausted(
        self,
        service: AIService,
        sleeps: list[float],
        locale_context: LocaleContext,
        sample_draft: DraftNarrative,
    ) -> None:
        """A fourth quota error surfaces as UpstreamQuotaError."""
        service._client = MagicMock()

        with patch.object(AIService, "_generate", side_effect=QUOTA_ERROR) as mock_generate:
            with pytest.raises(UpstreamQuotaError) as exc_info:
                service.generate_grounded(locale_context, sample_draft)

        assert exc_info.value.attempts == 4
        assert exc_info.value.__cause__ is QUOTA_ERROR
        assert mock_generate.call_count == 4
        assert sum(sleeps) == 22.0

    def test_other_errors_not_retried(
        self,
        service: AIService,
        sleeps: list[float],
        locale_context: LocaleContext,
        sample_draft: DraftNarrative,
    ) -> None:
        """Non-quota failures become UpstreamError without retrying."""
        service._client = MagicMock()

        with patch.object(
            AIService, "_generate", side_effect=ValueError("invalid model")
        ) as mock_generate:
            with pytest.raises(UpstreamError) as exc_info:
                service.generate_grounded(locale_context, sample_draft)

        assert not isinstance(exc_info.value, UpstreamQuotaError)
        assert mock_generate.call_count == 1
        assert sleeps == []

    def test_quota_error_without_retry_schedule(
        self,
        mock_settings: Settings,
        locale_context: LocaleContext,
        sample_draft: DraftNarrative,
    ) -> None:
        """An empty delay list still reports quota exhaustion, after one attempt."""
        settings = mock_settings.model_copy(update={"retry_delays": []})
        service = AIService(settings, RetryPolicy.from_settings(settings, sleep=lambda _: None))
        service._client = MagicMock()

        with patch.object(AIService, "_generate", side_effect=QUOTA_ERROR) as mock_generate:
            with pytest.raises(UpstreamQuotaError) as exc_info:
                service.generate_grounded(locale_context, sample_draft)

        assert exc_info.value.attempts == 1
        assert exc_info.value.__cause__ is QUOTA_ERROR
        assert mock_generate.call_count == 1
