# ABOUTME: Pytest fixtures and configuration for brief enricher tests.
# ABOUTME: Provides mock settings, locale fixtures, raw Gemini responses and a mock client.

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from pydantic import SecretStr

from brief_enricher.config import Settings
from brief_enricher.context.resolver import resolve_locale_context
from brief_enricher.models import (
    ContinuityItem,
    DocumentType,
    DraftNarrative,
    LocaleContext,
    LocaleFacts,
)
from brief_enricher.tables import EnrichmentTables

RAW_RESPONSE = """Good morning, Tribeca.

[[The Pizza Shuffle]]
**Joe's Pizza** is closing its Greenwich Street location on February 2 (1). The owners say rent doubled.

[[Gallery Night]]
The Vanguard Gallery opens a new show tonight at 7 PM — free entry.

See you tomorrow.

```json
{
  "categories": [
    {
      "name": "Food",
      "stories": [
        {
          "entity": "Joe's Pizza (Greenwich St)",
          "source": {"name": "Eater NY", "url": "https://ny.eater.com/joes"},
          "context": "Closing after 20 years."
        },
        {
          "entity": "Rumor Deli",
          "source": null,
          "context": "Unverified."
        }
      ]
    },
    {
      "name": "Arts",
      "stories": [
        {
          "entity": "Vanguard Gallery",
          "source": {"name": "Tribeca Citizen", "url": "https://tribecacitizen.com/vanguard"},
          "context": "New show."
        }
      ]
    }
  ],
  "link_candidates": [
    {"text": "Pizza"},
    {"text": "Joe's Pizza"},
    {"text": "Vanguard Gallery"},
    {"text": "Nonexistent Bistro"}
  ],
  "subject_teaser": "pizza exit",
  "email_teaser": "Plus, Joe's Pizza closes on Greenwich St. Vanguard Gallery will open a new show."
}
```"""

SANITIZED_PROSE = """Good morning, Tribeca.

[[The Pizza Shuffle]]
Joe's Pizza is closing its Greenwich Street location on February 2. The owners say rent doubled.

[[Gallery Night]]
The Vanguard Gallery opens a new show tonight at 7 PM - free entry.

See you tomorrow."""


@pytest.fixture
def mock_settings() -> Settings:
    """Create mock settings for testing."""
    return Settings(
        _env_file=None,
        gemini_api_key=SecretStr("test-api-key"),
        gemini_model="gemini-test",
        ai_temperature=0.5,
        retry_delays=[2.0, 5.0, 15.0],
        default_timezone="America/New_York",
        publication_hour=7,
        log_level="DEBUG",
    )


@pytest.fixture
def keyless_settings() -> Settings:
    """Settings with no Gemini API key."""
    return Settings(_env_file=None, gemini_api_key=None, gemini_model="gemini-test")


@pytest.fixture
def tables() -> EnrichmentTables:
    """Default tables with an extra blocked domain for the test locale."""
    return EnrichmentTables.build(
        blocked_domains={
            "tribeca": ["tribecacitizen.com"],
            "testville": ["example.com"],
        }
    )


@pytest.fixture
def reference_instant() -> datetime:
    """Monday, February 2, 2026 at noon UTC."""
    return datetime(2026, 2, 2, 12, 0, tzinfo=UTC)


@pytest.fixture
def locale_facts() -> LocaleFacts:
    """Tribeca, New York."""
    return LocaleFacts(name="Tribeca", slug="tribeca", city="New York", country="USA")


@pytest.fixture
def locale_context(
    locale_facts: LocaleFacts,
    reference_instant: datetime,
    tables: EnrichmentTables,
    mock_settings: Settings,
) -> LocaleContext:
    """Resolved daily-brief context for Tribeca."""
    return resolve_locale_context(
        locale_facts,
        DocumentType.DAILY_BRIEF,
        reference_instant,
        tables=tables,
        settings=mock_settings,
    )


@pytest.fixture
def sample_draft() -> DraftNarrative:
    """Draft with two candidate claims and prior coverage."""
    return DraftNarrative(
        content=(
            "- Joe's Pizza on Greenwich St may be closing\n"
            "- Vanguard Gallery has a new show opening\n"
            "- Rumor: a deli is moving in on Hudson"
        ),
        document_type=DocumentType.DAILY_BRIEF,
        prior_coverage=[
            ContinuityItem(
                date="Sunday, February 1",
                headline="Hudson Street gets a new bike lane",
                excerpt="The city finished the Hudson Street lane.",
            ),
            ContinuityItem(
                date="Saturday, January 31",
                headline="Bakery opens on Franklin",
                type="article",
                article_type="new_opening",
            ),
        ],
    )


@pytest.fixture
def raw_response() -> str:
    """Raw Gemini response: prose followed by a fenced JSON block."""
    return RAW_RESPONSE


@pytest.fixture
def sanitized_prose() -> str:
    """The prose part of raw_response after sanitization."""
    return SANITIZED_PROSE


@pytest.fixture
def mock_genai_client(raw_response: str) -> MagicMock:
    """Create a mock Gemini client that streams the raw response in two chunks."""
    client = MagicMock()
    half = len(raw_response) // 2

    first = MagicMock()
    first.text = raw_response[:half]
    first.candidates = []
    second = MagicMock()
    second.text = raw_response[half:]
    second.candidates = [MagicMock(finish_reason="STOP")]

    client.models.generate_content_stream.return_value = iter([first, second])
    return client
