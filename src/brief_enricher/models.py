# ABOUTME: Pydantic models for the brief enrichment pipeline.
# ABOUTME: Defines locale context, draft input, story structures and the EnrichedDocument output.

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class DocumentType(str, Enum):
    """Kind of document being enriched. Selects the style-directive bundle."""

    DAILY_BRIEF = "daily_brief"
    WEEKLY_RECAP = "weekly_recap"
    LOOK_AHEAD = "look_ahead"


class ExtractionStatus(str, Enum):
    """Outcome of locating and parsing the machine-readable block."""

    PARSED = "parsed"
    MISSING_BLOCK = "missing_block"
    MALFORMED_BLOCK = "malformed_block"


class Source(BaseModel):
    """A citation backing a story."""

    name: str
    url: str

    @field_validator("url")
    @classmethod
    def _require_http_url(cls, value: str) -> str:
        value = value.strip()
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError(f"source url must be http(s): {value!r}")
        return value


class StoryItem(BaseModel):
    """A single verified story returned by the grounded generation step."""

    entity: str
    source: Source | None = None
    context: str = ""
    note: str | None = None
    secondary_source: Source | None = Field(
        default=None,
        validation_alias=AliasChoices("secondary_source", "secondarySource"),
    )
    fallback_url: str = ""

    @field_validator("context", mode="before")
    @classmethod
    def _null_context_is_empty(cls, value: object) -> object:
        return "" if value is None else value


class StoryCategory(BaseModel):
    """A named group of stories."""

    name: str
    stories: list[StoryItem] = Field(default_factory=list)


class LinkCandidate(BaseModel):
    """A phrase the backend nominated for hyperlinking."""

    text: str


class ContinuityItem(BaseModel):
    """Summary of prior coverage, used only to avoid repeating stories."""

    date: str = Field(description="Display date, e.g. 'Monday, February 16'")
    headline: str
    excerpt: str | None = None
    type: Literal["brief", "article"] = "brief"
    article_type: str | None = Field(default=None, description="e.g. 'new_opening', 'closure'")


class LocaleFacts(BaseModel):
    """Caller-supplied facts about the neighborhood being covered."""

    name: str = Field(description="Neighborhood / place name, e.g. 'Östermalm'")
    slug: str = Field(description="Stable key used for per-locale tables")
    city: str
    country: str = "USA"
    timezone: str | None = Field(default=None, description="IANA zone; overrides country lookup")


class StyleBundle(BaseModel):
    """Editorial directives for one document type."""

    model_config = ConfigDict(frozen=True)

    key: DocumentType
    style: str
    opening_rule: str
    include_continuity: bool = False


class LocaleContext(BaseModel):
    """Resolved, immutable per-call locale and prompt context."""

    model_config = ConfigDict(frozen=True)

    facts: LocaleFacts
    document_type: DocumentType
    timezone: str
    reference_instant: datetime
    local_now: datetime
    date_label: str
    context_time_label: str
    style: StyleBundle
    language_hint: str = ""
    urban_note: str = ""
    blocked_domains: tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.facts.name

    @property
    def city(self) -> str:
        return self.facts.city


class DraftNarrative(BaseModel):
    """Unverified candidate claims to research and rewrite."""

    content: str
    document_type: DocumentType = DocumentType.DAILY_BRIEF
    prior_coverage: list[ContinuityItem] = Field(default_factory=list)


class EnrichOptions(BaseModel):
    """Per-call overrides for enrich()."""

    model: str | None = None
    reference_instant: datetime | None = None
    document_type: DocumentType | None = None
    date_label: str | None = None


class ExtractionResult(BaseModel):
    """Everything derived from one raw backend response."""

    prose: str
    categories: list[StoryCategory] = Field(default_factory=list)
    link_candidates: list[LinkCandidate] = Field(default_factory=list)
    subject_teaser: str | None = None
    email_teaser: str | None = None
    status: ExtractionStatus = ExtractionStatus.MISSING_BLOCK


class EnrichedDocument(BaseModel):
    """Publication-ready output of the enrichment pipeline."""

    date: str
    neighborhood: str
    categories: list[StoryCategory] = Field(default_factory=list)
    prose: str
    model: str
    blocked_domains: list[str] = Field(default_factory=list)
    subject_teaser: str | None = None
    email_teaser: str | None = None
    link_candidates: list[LinkCandidate] = Field(default_factory=list)
    extraction_status: ExtractionStatus
    processed_at: datetime

    @property
    def is_prose_only(self) -> bool:
        """True when no structured stories survived. Still a valid result."""
        return not self.categories
