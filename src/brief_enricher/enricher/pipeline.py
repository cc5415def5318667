# ABOUTME: End-to-end enrichment pipeline: resolve, generate, extract, link, assemble.
# ABOUTME: Stateless per call; only configuration and upstream errors reach the caller.

from datetime import UTC, datetime

import structlog

from brief_enricher.ai.service import AIService
from brief_enricher.config import Settings, get_settings
from brief_enricher.context.resolver import resolve_locale_context
from brief_enricher.enricher.assembler import assemble_document
from brief_enricher.extraction.extractor import extract
from brief_enricher.links.injector import inject_hyperlinks
from brief_enricher.models import DraftNarrative, EnrichedDocument, EnrichOptions, LocaleFacts
from brief_enricher.tables import DEFAULT_TABLES, EnrichmentTables

log = structlog.get_logger()


class BriefEnricher:
    """Turns an unverified draft into a sourced, linked, publication-ready document."""

    def __init__(
        self,
        settings: Settings | None = None,
        tables: EnrichmentTables = DEFAULT_TABLES,
        ai_service: AIService | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.tables = tables
        self.ai_service = ai_service or AIService(self.settings)

    def enrich(
        self,
        draft: DraftNarrative,
        facts: LocaleFacts,
        options: EnrichOptions | None = None,
    ) -> EnrichedDocument:
        """Run the full enrichment pipeline for one draft.

        Args:
            draft: Candidate claims, document type and prior coverage.
            facts: Locale facts for the neighborhood.
            options: Model, reference instant, document type and date overrides.

        Returns:
            EnrichedDocument. Categories may be empty (prose-only result).

        Raises:
            ConfigurationError: Missing API key.
            UpstreamQuotaError: Quota retries exhausted.
            UpstreamError: Any other backend failure.
        """
        options = options or EnrichOptions()
        document_type = options.document_type or draft.document_type
        model = options.model or self.settings.gemini_model

        context = resolve_locale_context(
            facts,
            document_type,
            options.reference_instant,
            tables=self.tables,
            settings=self.settings,
            date_label=options.date_label,
        )

        log.info(
            "enrichment_start",
            neighborhood=facts.name,
            document_type=document_type.value,
            model=model,
            date=context.date_label,
        )

        raw = self.ai_service.generate_grounded(context, draft, model=model)
        extraction = extract(raw, context=context, tables=self.tables)

        prose = extraction.prose
        if extraction.link_candidates and prose:
            prose = inject_hyperlinks(prose, extraction.link_candidates, context)

        document = assemble_document(
            extraction,
            prose,
            context,
            model,
            processed_at=datetime.now(UTC),
        )

        log.info(
            "enrichment_complete",
            neighborhood=facts.name,
            extraction_status=document.extraction_status.value,
            categories=len(document.categories),
            prose_chars=len(document.prose),
        )
        return document


def enrich(
    draft: DraftNarrative,
    facts: LocaleFacts,
    options: EnrichOptions | None = None,
    *,
    settings: Settings | None = None,
    tables: EnrichmentTables = DEFAULT_TABLES,
) -> EnrichedDocument:
    """Convenience wrapper around BriefEnricher.enrich."""
    return BriefEnricher(settings, tables).enrich(draft, facts, options)
