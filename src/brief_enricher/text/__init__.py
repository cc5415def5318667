# ABOUTME: Text transform library for prose sanitization and teaser cleanup.
# ABOUTME: Exports the two idempotent pipelines and their entry points.

from brief_enricher.text.transforms import (
    PROSE_SANITIZER,
    TEASER_CLEANER,
    clean_teaser,
    sanitize_prose,
)

__all__ = ["PROSE_SANITIZER", "TEASER_CLEANER", "clean_teaser", "sanitize_prose"]
