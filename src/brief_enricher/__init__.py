# ABOUTME: Main package for the grounded neighborhood brief enricher.
# ABOUTME: Exports the enrich() entry point, its models and error types.

from brief_enricher.config import get_settings
from brief_enricher.enricher import BriefEnricher, enrich, format_document_as_markdown
from brief_enricher.errors import (
    ConfigurationError,
    EnrichmentError,
    UpstreamError,
    UpstreamQuotaError,
)
from brief_enricher.models import (
    DocumentType,
    DraftNarrative,
    EnrichedDocument,
    EnrichOptions,
    LocaleFacts,
)

__all__ = [
    "get_settings",
    "BriefEnricher",
    "enrich",
    "format_document_as_markdown",
    "ConfigurationError",
    "EnrichmentError",
    "UpstreamError",
    "UpstreamQuotaError",
    "DocumentType",
    "DraftNarrative",
    "EnrichedDocument",
    "EnrichOptions",
    "LocaleFacts",
]
