# ABOUTME: Enrichment pipeline and document assembly.
# ABOUTME: Exports BriefEnricher, enrich() and the markdown formatter.

from brief_enricher.enricher.assembler import assemble_document, format_document_as_markdown
from brief_enricher.enricher.pipeline import BriefEnricher, enrich

__all__ = ["BriefEnricher", "assemble_document", "enrich", "format_document_as_markdown"]
