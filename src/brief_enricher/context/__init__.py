# ABOUTME: Locale and prompt context resolution.
# ABOUTME: Exports resolve_locale_context.

from brief_enricher.context.resolver import resolve_locale_context

__all__ = ["resolve_locale_context"]
