# ABOUTME: Static, read-only lookup tables used by every enrichment call.
# ABOUTME: Timezones, blocked domains, language hints and style bundles, passed in explicitly.

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from brief_enricher.ai.prompts import (
    DAILY_BRIEF_OPENING,
    DAILY_BRIEF_STYLE,
    DIRECT_OPENING,
    LOOK_AHEAD_STYLE,
    WEEKLY_RECAP_STYLE,
)
from brief_enricher.models import DocumentType, StyleBundle

COUNTRY_TIMEZONES: dict[str, str] = {
    "Sweden": "Europe/Stockholm",
    "USA": "America/New_York",
    "France": "Europe/Paris",
    "Germany": "Europe/Berlin",
    "Spain": "Europe/Madrid",
    "Italy": "Europe/Rome",
    "UK": "Europe/London",
    "Japan": "Asia/Tokyo",
    "Australia": "Australia/Sydney",
    "Singapore": "Asia/Singapore",
    "UAE": "Asia/Dubai",
    "South Africa": "Africa/Johannesburg",
    "Brazil": "America/Sao_Paulo",
    "Mexico": "America/Mexico_City",
    "India": "Asia/Kolkata",
    "China": "Asia/Shanghai",
    "South Korea": "Asia/Seoul",
    "Thailand": "Asia/Bangkok",
    "Netherlands": "Europe/Amsterdam",
    "Ireland": "Europe/Dublin",
    "Portugal": "Europe/Lisbon",
    "Switzerland": "Europe/Zurich",
    "Austria": "Europe/Vienna",
    "Denmark": "Europe/Copenhagen",
    "Norway": "Europe/Oslo",
    "Finland": "Europe/Helsinki",
    "Belgium": "Europe/Brussels",
    "Greece": "Europe/Athens",
    "Turkey": "Europe/Istanbul",
    "Israel": "Asia/Jerusalem",
    "Canada": "America/Toronto",
    "Argentina": "America/Argentina/Buenos_Aires",
    "Chile": "America/Santiago",
    "Colombia": "America/Bogota",
    "New Zealand": "Pacific/Auckland",
    "Hong Kong": "Asia/Hong_Kong",
    "Taiwan": "Asia/Taipei",
    "Philippines": "Asia/Manila",
    "Indonesia": "Asia/Jakarta",
    "Malaysia": "Asia/Kuala_Lumpur",
    "Vietnam": "Asia/Ho_Chi_Minh",
}

# Keyed by lowercase locale slug
BLOCKED_DOMAINS: dict[str, tuple[str, ...]] = {
    "tribeca": ("tribecacitizen.com",),
}

LANGUAGE_HINTS: dict[str, str] = {
    "Sweden": (
        "IMPORTANT: Search Swedish news sites like Thatsup.se, Restaurangvärlden, Mitt i, "
        'DN.se, and SVD.se. Also try Swedish search terms like "öppnar", "nytt café", "restaurang".'
    ),
    "France": "Search in both French and English. Try French news sites.",
    "Germany": "Search in both German and English. Try German news sites.",
    "Spain": "Search in both Spanish and English. Try Spanish news sites.",
    "Italy": "Search in both Italian and English. Try Italian news sites.",
}

DENSE_URBAN_CITIES: tuple[str, ...] = (
    "New York",
    "London",
    "Paris",
    "Stockholm",
    "Amsterdam",
    "Chicago",
    "Singapore",
    "Tokyo",
    "Sydney",
    "Dublin",
    "San Francisco",
    "Washington DC",
    "Cape Town",
)

GREETING_PATTERN = (
    r"^(good morning|god morgon|bonjour|buongiorno|guten morgen|buenos d[ií]as|bom dia"
    r"|goedemorgen|morning)"
)

STYLE_BUNDLES: dict[DocumentType, StyleBundle] = {
    DocumentType.DAILY_BRIEF: StyleBundle(
        key=DocumentType.DAILY_BRIEF,
        style=DAILY_BRIEF_STYLE,
        opening_rule=DAILY_BRIEF_OPENING,
        include_continuity=True,
    ),
    DocumentType.WEEKLY_RECAP: StyleBundle(
        key=DocumentType.WEEKLY_RECAP,
        style=WEEKLY_RECAP_STYLE,
        opening_rule=DIRECT_OPENING,
    ),
    DocumentType.LOOK_AHEAD: StyleBundle(
        key=DocumentType.LOOK_AHEAD,
        style=LOOK_AHEAD_STYLE,
        opening_rule=DIRECT_OPENING,
    ),
}


@dataclass(frozen=True)
class EnrichmentTables:
    """Read-only configuration tables for one enrichment call.

    Pass a custom instance to substitute fixtures; the defaults are never mutated.
    """

    country_timezones: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(COUNTRY_TIMEZONES))
    )
    blocked_domains: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType(dict(BLOCKED_DOMAINS))
    )
    language_hints: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(LANGUAGE_HINTS))
    )
    dense_urban_cities: tuple[str, ...] = DENSE_URBAN_CITIES
    greeting_pattern: str = GREETING_PATTERN
    style_bundles: Mapping[DocumentType, StyleBundle] = field(
        default_factory=lambda: MappingProxyType(dict(STYLE_BUNDLES))
    )

    @classmethod
    def build(
        cls,
        *,
        country_timezones: dict[str, str] | None = None,
        blocked_domains: dict[str, tuple[str, ...] | list[str]] | None = None,
        language_hints: dict[str, str] | None = None,
        dense_urban_cities: tuple[str, ...] | None = None,
        greeting_pattern: str | None = None,
    ) -> "EnrichmentTables":
        """Create tables, replacing only the tables that are given."""
        overrides: dict[str, object] = {}
        if country_timezones is not None:
            overrides["country_timezones"] = MappingProxyType(dict(country_timezones))
        if blocked_domains is not None:
            overrides["blocked_domains"] = MappingProxyType(
                {slug.lower(): tuple(domains) for slug, domains in blocked_domains.items()}
            )
        if language_hints is not None:
            overrides["language_hints"] = MappingProxyType(dict(language_hints))
        if dense_urban_cities is not None:
            overrides["dense_urban_cities"] = tuple(dense_urban_cities)
        if greeting_pattern is not None:
            overrides["greeting_pattern"] = greeting_pattern
        return cls(**overrides)

    def timezone_for(self, country: str, default: str) -> str:
        return self.country_timezones.get(country, default)

    def blocked_for(self, slug: str) -> tuple[str, ...]:
        return tuple(self.blocked_domains.get(slug.lower(), ()))

    def language_hint_for(self, country: str) -> str:
        return self.language_hints.get(country, "")

    def is_dense_urban(self, city: str) -> bool:
        lowered = city.lower()
        return any(c.lower() in lowered for c in self.dense_urban_cities)

    def style_for(self, document_type: DocumentType) -> StyleBundle:
        return self.style_bundles[document_type]

    @property
    def greeting_regex(self) -> re.Pattern[str]:
        return re.compile(self.greeting_pattern, re.IGNORECASE)


DEFAULT_TABLES = EnrichmentTables()
