# ABOUTME: Google Gemini service for grounded brief enrichment.
# ABOUTME: Builds the outgoing prompt and runs one search-grounded generation with quota-aware retry.

import structlog
from google import genai
from google.genai import types

from brief_enricher.ai.prompts import (
    BASE_PERSONA,
    BLOCKED_SOURCES_NOTE,
    CONTINUITY_HEADER,
    ENRICHMENT_PROMPT,
    OUTPUT_CONTRACT,
)
from brief_enricher.ai.retry import RetryPolicy
from brief_enricher.config import Settings, get_settings
from brief_enricher.errors import ConfigurationError, UpstreamError, UpstreamQuotaError
from brief_enricher.models import ContinuityItem, DraftNarrative, LocaleContext

log = structlog.get_logger()


class AIService:
    """Service for grounded generation with Google Gemini."""

    def __init__(
        self,
        settings: Settings | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.retry_policy = retry_policy or RetryPolicy.from_settings(self.settings)
        self._client: genai.Client | None = None

    @property
    def client(self) -> genai.Client:
        """Lazy-initialized Gemini client."""
        if self._client is None:
            if not self.settings.gemini_api_key:
                raise ConfigurationError("GEMINI_API_KEY not configured")
            self._client = genai.Client(
                api_key=self.settings.gemini_api_key.get_secret_value(),
            )
        return self._client

    def _generate_content_config(self, system_prompt: str) -> types.GenerateContentConfig:
        """Create generation config with Google Search grounding enabled."""
        return types.GenerateContentConfig(
            temperature=self.settings.ai_temperature,
            tools=[types.Tool(google_search=types.GoogleSearch())],
            system_instruction=[types.Part.from_text(text=system_prompt)],
        )

    def _generate(self, prompt: str, system_prompt: str, model: str) -> str:
        """Run a single generation attempt and return the concatenated text."""
        log.debug(
            "generating_content",
            model=model,
            prompt_length=len(prompt),
            system_prompt_length=len(system_prompt),
        )

        contents = [
            types.Content(
                role="user",
                parts=[types.Part.from_text(text=prompt)],
            ),
        ]

        result = ""
        chunk_count = 0
        finish_reason = None

        for chunk in self.client.models.generate_content_stream(
            model=model,
            contents=contents,
            config=self._generate_content_config(system_prompt),
        ):
            chunk_count += 1

            if getattr(chunk, "candidates", None):
                candidate = chunk.candidates[0]
                if getattr(candidate, "finish_reason", None):
                    finish_reason = candidate.finish_reason

            if chunk.text:
                result += chunk.text

        log.debug(
            "generation_complete",
            chunk_count=chunk_count,
            result_length=len(result),
            finish_reason=str(finish_reason) if finish_reason else None,
        )

        if not result.strip():
            log.warning(
                "empty_generation_result",
                chunk_count=chunk_count,
                finish_reason=str(finish_reason) if finish_reason else "unknown",
            )

        return result

    def build_system_instruction(self, context: LocaleContext) -> str:
        """Persona with the local 'now' followed by the document type's style bundle."""
        persona = BASE_PERSONA.format(
            name=context.name,
            city=context.city,
            context_time=context.context_time_label,
            date_label=context.date_label,
        )
        return persona + context.style.style

    def build_prompt(self, context: LocaleContext, draft: DraftNarrative) -> str:
        """Combine draft claims, locale notes and the output contract into one prompt."""
        notes = ""
        if context.blocked_domains:
            notes += BLOCKED_SOURCES_NOTE.format(domains=", ".join(context.blocked_domains))
        notes += context.urban_note
        if context.style.include_continuity:
            notes += self._format_continuity(draft.prior_coverage)

        prompt = ENRICHMENT_PROMPT.format(
            name=context.name,
            city=context.city,
            draft=draft.content,
            notes=notes,
            language_hint=context.language_hint,
            opening_rule=context.style.opening_rule.format(name=context.name),
        )
        return prompt + OUTPUT_CONTRACT

    def _format_continuity(self, items: list[ContinuityItem]) -> str:
        """Format prior coverage as background. Returns empty string when there is none."""
        if not items:
            return ""

        briefs = [i for i in items if i.type == "brief"]
        articles = [i for i in items if i.type == "article"]

        sections = [CONTINUITY_HEADER]

        if briefs:
            sections.append("\nPrevious Daily Briefs:\n")
            for brief in briefs:
                sections.append(f'- {brief.date}: "{brief.headline}"\n')
                if brief.excerpt:
                    sections.append(f"  Summary: {brief.excerpt}\n")

        if articles:
            sections.append("\nRecent Articles:\n")
            for article in articles:
                label = f"[{article.article_type.replace('_', ' ')}] " if article.article_type else ""
                sections.append(f'- {article.date}: {label}"{article.headline}"\n')

        return "".join(sections)

    def generate_grounded(
        self,
        context: LocaleContext,
        draft: DraftNarrative,
        model: str | None = None,
    ) -> str:
        """Ask Gemini to verify the draft against live search and rewrite it.

        Args:
            context: Resolved locale context.
            draft: Candidate claims and prior coverage.
            model: Model override. Defaults to settings value.

        Returns:
            Raw response text (prose followed by a ```json block).

        Raises:
            ConfigurationError: No API key; raised before any request is made.
            UpstreamQuotaError: Quota errors outlasted the retry schedule.
            UpstreamError: Any other backend failure.
        """
        model = model or self.settings.gemini_model
        self.client  # noqa: B018 - fail fast on missing credentials

        system_prompt = self.build_system_instruction(context)
        prompt = self.build_prompt(context, draft)

        log.info(
            "grounded_generation_start",
            neighborhood=context.name,
            model=model,
            document_type=context.document_type.value,
            prompt_chars=len(prompt),
        )

        try:
            return self.retry_policy.call(self._generate, prompt, system_prompt, model)
        except ConfigurationError:
            raise
        except Exception as e:
            if self.retry_policy.is_retryable(e):
                log.error(
                    "quota_retries_exhausted",
                    attempts=self.retry_policy.max_attempts,
                    error=str(e)[:200],
                )
                raise UpstreamQuotaError(
                    f"Gemini quota exhausted after {self.retry_policy.max_attempts} attempts: {e}",
                    attempts=self.retry_policy.max_attempts,
                ) from e
            log.error("grounded_generation_failed", error_type=type(e).__name__, error=str(e)[:200])
            raise UpstreamError(f"Gemini request failed: {e}") from e
