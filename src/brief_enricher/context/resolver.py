# ABOUTME: Resolves caller-supplied locale facts into an immutable LocaleContext.
# ABOUTME: Picks the timezone, local date labels, publication-hour framing and style bundle.

from datetime import UTC, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog

from brief_enricher.ai.prompts import URBAN_CONTEXT_NOTE
from brief_enricher.config import Settings, get_settings
from brief_enricher.models import DocumentType, LocaleContext, LocaleFacts
from brief_enricher.tables import DEFAULT_TABLES, EnrichmentTables

log = structlog.get_logger()


def resolve_timezone(
    facts: LocaleFacts,
    tables: EnrichmentTables,
    default_timezone: str,
) -> str:
    """Explicit timezone wins; otherwise look up the country, else the default zone."""
    candidate = facts.timezone or tables.timezone_for(facts.country, default_timezone)
    try:
        ZoneInfo(candidate)
    except (ZoneInfoNotFoundError, ValueError):
        log.warning("unknown_timezone", timezone=candidate, fallback=default_timezone)
        return default_timezone
    return candidate


def format_date_label(moment: datetime) -> str:
    """'Monday, February 2, 2026'."""
    return f"{moment:%A}, {moment:%B} {moment.day}, {moment.year}"


def format_context_time(moment: datetime, publication_hour: int) -> str:
    """Local date framed at the publication hour: 'Monday, February 2, 2026 at 7:00 AM CET'.

    The actual processing time is discarded; readers always see the brief at
    the same local hour.
    """
    published = moment.replace(hour=publication_hour, minute=0, second=0, microsecond=0)
    hour = published.hour % 12 or 12
    meridiem = "AM" if published.hour < 12 else "PM"
    return f"{format_date_label(published)} at {hour}:00 {meridiem} {published.tzname()}"


def resolve_locale_context(
    facts: LocaleFacts,
    document_type: DocumentType = DocumentType.DAILY_BRIEF,
    reference_instant: datetime | None = None,
    *,
    tables: EnrichmentTables = DEFAULT_TABLES,
    settings: Settings | None = None,
    date_label: str | None = None,
) -> LocaleContext:
    """Build the per-call locale context.

    Args:
        facts: Neighborhood name, slug, city, country and optional timezone.
        document_type: Selects the style-directive bundle.
        reference_instant: When the draft was produced. Authoritative for what
            "today" means; defaults to now. Naive values are read as UTC.
        tables: Static lookup tables.
        settings: Settings for the fallback zone and publication hour.
        date_label: Explicit display date, overriding the computed one.

    Returns:
        Frozen LocaleContext.
    """
    settings = settings or get_settings()

    instant = reference_instant or datetime.now(UTC)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)

    timezone = resolve_timezone(facts, tables, settings.default_timezone)
    local_now = instant.astimezone(ZoneInfo(timezone))

    urban_note = (
        URBAN_CONTEXT_NOTE.format(city=facts.city) if tables.is_dense_urban(facts.city) else ""
    )

    context = LocaleContext(
        facts=facts,
        document_type=document_type,
        timezone=timezone,
        reference_instant=instant,
        local_now=local_now,
        date_label=date_label or format_date_label(local_now),
        context_time_label=format_context_time(local_now, settings.publication_hour),
        style=tables.style_for(document_type),
        language_hint=tables.language_hint_for(facts.country),
        urban_note=urban_note,
        blocked_domains=tables.blocked_for(facts.slug),
    )

    log.debug(
        "locale_context_resolved",
        neighborhood=facts.name,
        timezone=timezone,
        date=context.date_label,
        document_type=document_type.value,
    )
    return context
