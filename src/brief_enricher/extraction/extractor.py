# ABOUTME: Turns a raw Gemini response into sanitized prose plus validated structured data.
# ABOUTME: Never raises; a missing or malformed block degrades to a prose-only result.

import structlog

from brief_enricher.extraction.parser import locate_block, parse_block
from brief_enricher.extraction.validators import (
    apply_blocked_domains,
    parse_categories,
    validate_email_teaser,
    validate_link_candidates,
    validate_subject_teaser,
)
from brief_enricher.links.injector import sanitize_markdown_links
from brief_enricher.models import ExtractionResult, ExtractionStatus, LocaleContext
from brief_enricher.tables import DEFAULT_TABLES, EnrichmentTables
from brief_enricher.text.transforms import sanitize_prose

log = structlog.get_logger()


def extract(
    raw: str,
    *,
    context: LocaleContext,
    tables: EnrichmentTables = DEFAULT_TABLES,
) -> ExtractionResult:
    """Split a raw response into prose and structured branches.

    Args:
        raw: Backend response text.
        context: Locale context (blocked domains, name for fallback URLs).
        tables: Static tables (greeting pattern).

    Returns:
        ExtractionResult. Prose is always present; categories and candidates
        are empty when the block is missing or malformed.
    """
    prose = sanitize_markdown_links(sanitize_prose(raw))

    block = locate_block(raw)
    if block is None:
        log.warning("machine_block_missing", neighborhood=context.name, prose_chars=len(prose))
        return ExtractionResult(prose=prose, status=ExtractionStatus.MISSING_BLOCK)

    try:
        data = parse_block(block)
    except ValueError as e:
        log.warning("machine_block_malformed", neighborhood=context.name, error=str(e)[:200])
        return ExtractionResult(prose=prose, status=ExtractionStatus.MALFORMED_BLOCK)

    categories = parse_categories(data.get("categories"))
    apply_blocked_domains(categories, context.blocked_domains, context.name)

    result = ExtractionResult(
        prose=prose,
        categories=categories,
        link_candidates=validate_link_candidates(data.get("link_candidates"), prose),
        subject_teaser=validate_subject_teaser(data.get("subject_teaser")),
        email_teaser=validate_email_teaser(data.get("email_teaser"), tables.greeting_regex),
        status=ExtractionStatus.PARSED,
    )

    log.info(
        "extraction_complete",
        neighborhood=context.name,
        categories=len(result.categories),
        stories=sum(len(c.stories) for c in result.categories),
        link_candidates=len(result.link_candidates),
        has_subject_teaser=result.subject_teaser is not None,
        has_email_teaser=result.email_teaser is not None,
    )
    return result
