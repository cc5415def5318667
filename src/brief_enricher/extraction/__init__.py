# ABOUTME: Structured extraction and validation of Gemini responses.
# ABOUTME: Exports extract() plus the individual parsing and validation steps.

from brief_enricher.extraction.extractor import extract
from brief_enricher.extraction.parser import locate_block, parse_block
from brief_enricher.extraction.validators import (
    EXCLUSION_MARKER,
    apply_blocked_domains,
    parse_categories,
    validate_email_teaser,
    validate_link_candidates,
    validate_subject_teaser,
)

__all__ = [
    "EXCLUSION_MARKER",
    "apply_blocked_domains",
    "extract",
    "locate_block",
    "parse_block",
    "parse_categories",
    "validate_email_teaser",
    "validate_link_candidates",
    "validate_subject_teaser",
]
