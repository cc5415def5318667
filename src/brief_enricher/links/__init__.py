# ABOUTME: Hyperlink injection for enriched prose.
# ABOUTME: Exports the injector, markdown link sanitizer and search URL builders.

from brief_enricher.links.injector import (
    find_free_occurrence,
    inject_hyperlinks,
    protected_spans,
    sanitize_markdown_links,
)
from brief_enricher.links.urls import build_fallback_url, build_link_url, build_search_url

__all__ = [
    "build_fallback_url",
    "build_link_url",
    "build_search_url",
    "find_free_occurrence",
    "inject_hyperlinks",
    "protected_spans",
    "sanitize_markdown_links",
]
