# ABOUTME: Independent validation gates for fields of the machine-readable block.
# ABOUTME: A failing gate drops only its own field; blocked-domain post-filter for story sources.

import re
from typing import Any

import structlog
from pydantic import ValidationError

from brief_enricher.links.urls import build_fallback_url
from brief_enricher.models import LinkCandidate, StoryCategory, StoryItem
from brief_enricher.text.transforms import clean_teaser

log = structlog.get_logger()

SUBJECT_TEASER_MAX_WORDS = 5
SUBJECT_TEASER_MAX_CHARS = 40
EMAIL_TEASER_MIN_CHARS = 10
EMAIL_TEASER_MAX_CHARS = 200
MIN_CANDIDATE_LENGTH = 2

EXCLUSION_MARKER = "[Source excluded]"


def validate_subject_teaser(value: Any) -> str | None:
    """1-5 words and at most 40 characters, else None."""
    if not isinstance(value, str):
        return None

    teaser = value.strip()
    word_count = len(teaser.split())
    if 1 <= word_count <= SUBJECT_TEASER_MAX_WORDS and len(teaser) <= SUBJECT_TEASER_MAX_CHARS:
        return teaser

    log.warning("subject_teaser_rejected", words=word_count, chars=len(teaser), teaser=teaser)
    return None


def validate_email_teaser(value: Any, greeting: re.Pattern[str]) -> str | None:
    """Cleaned teaser of 10-200 chars ending in '.' or '!' and not opening with a greeting."""
    if not isinstance(value, str):
        return None

    teaser = clean_teaser(value.strip())
    has_ending = teaser.endswith((".", "!"))
    is_greeting = bool(greeting.match(teaser))

    in_range = EMAIL_TEASER_MIN_CHARS <= len(teaser) <= EMAIL_TEASER_MAX_CHARS
    if in_range and has_ending and not is_greeting:
        return teaser

    log.warning(
        "email_teaser_rejected",
        chars=len(teaser),
        has_ending=has_ending,
        is_greeting=is_greeting,
        teaser=teaser,
    )
    return None


def validate_link_candidates(raw: Any, prose: str) -> list[LinkCandidate]:
    """Keep candidates whose exact text occurs in the prose. Order kept, duplicates dropped."""
    if not isinstance(raw, list):
        return []

    valid: list[LinkCandidate] = []
    seen: set[str] = set()
    dropped = 0

    for item in raw:
        text = item.get("text") if isinstance(item, dict) else item
        if not isinstance(text, str):
            dropped += 1
            continue

        text = text.strip()
        if len(text) < MIN_CANDIDATE_LENGTH or text not in prose:
            dropped += 1
            continue

        if text not in seen:
            seen.add(text)
            valid.append(LinkCandidate(text=text))

    if dropped:
        log.info("link_candidates_dropped", dropped=dropped, kept=len(valid))
    return valid


def parse_categories(raw: Any) -> list[StoryCategory]:
    """Build categories from the block, keeping only stories that cite a source.

    Stories without a valid source are dropped here so a missing citation is
    never presented as a verified story. Categories left empty are dropped too.
    """
    if not isinstance(raw, list):
        return []

    categories: list[StoryCategory] = []

    for raw_category in raw:
        if not isinstance(raw_category, dict) or not isinstance(raw_category.get("name"), str):
            log.warning("category_skipped", reason="missing name")
            continue

        raw_stories = raw_category.get("stories") or []
        if not isinstance(raw_stories, list):
            log.warning(
                "category_skipped", reason="stories is not a list", name=raw_category["name"]
            )
            continue

        stories: list[StoryItem] = []
        for raw_story in raw_stories:
            try:
                story = StoryItem.model_validate(raw_story)
            except ValidationError as e:
                log.warning("story_skipped", category=raw_category["name"], error=str(e)[:200])
                continue

            if story.source is None:
                log.info("unsourced_story_dropped", entity=story.entity)
                continue
            stories.append(story)

        if stories:
            categories.append(StoryCategory(name=raw_category["name"], stories=stories))

    return categories


def apply_blocked_domains(
    categories: list[StoryCategory],
    blocked_domains: tuple[str, ...] | list[str],
    locale_name: str,
) -> None:
    """Null sources on blocked domains and set every story's fallback search URL.

    Mutates the stories in place; call exactly once per extraction.
    """
    blocked = [domain.lower() for domain in blocked_domains]

    for category in categories:
        for story in category.stories:
            if story.source and any(domain in story.source.url.lower() for domain in blocked):
                log.info("blocked_source_excluded", entity=story.entity, url=story.source.url)
                story.source = None
                story.context = f"{EXCLUSION_MARKER} {story.context}"

            story.fallback_url = build_fallback_url(story.entity, locale_name)
