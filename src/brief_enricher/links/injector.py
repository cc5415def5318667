# ABOUTME: Injects search hyperlinks into prose for validated link candidates.
# ABOUTME: Longest match first, first free occurrence only, never overlapping existing links or headers.

import re
from collections.abc import Iterable
from typing import Protocol

import structlog

from brief_enricher.links.urls import build_link_url
from brief_enricher.models import LinkCandidate

log = structlog.get_logger()

MIN_CANDIDATE_LENGTH = 2

_MARKDOWN_LINK_START = re.compile(r"\[([^\[\]\n]+)\]\(")
_MARKDOWN_LINK = re.compile(r"\[[^\[\]\n]+\]\([^()\s]*\)")
_HTML_ANCHOR = re.compile(r"<a\b[^>]*>.*?</a>", re.IGNORECASE | re.DOTALL)
_HEADER_MARKER = re.compile(r"\[\[[^\[\]\n]*\]\]")


class NamedLocale(Protocol):
    name: str
    city: str


Span = tuple[int, int]


def _find_url_end(text: str, open_paren: int) -> int | None:
    """Index of the ')' closing the URL that starts after open_paren, or None."""
    depth = 0
    for i in range(open_paren, len(text)):
        char = text[i]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return i
        elif char.isspace():
            return None
    return None


def sanitize_markdown_links(text: str) -> str:
    """Percent-encode parentheses inside the URL part of [text](url) links.

    Gemini emits Wikipedia-style URLs like (https://x/Foo_(bar)) which break
    inline link parsing. Text outside link URLs is left untouched.
    """
    result: list[str] = []
    pos = 0
    for match in _MARKDOWN_LINK_START.finditer(text):
        if match.start() < pos:
            continue
        open_paren = match.end() - 1
        close_paren = _find_url_end(text, open_paren)
        if close_paren is None:
            continue
        url = text[open_paren + 1 : close_paren]
        result.append(text[pos : open_paren + 1])
        result.append(url.replace("(", "%28").replace(")", "%29"))
        pos = close_paren
    result.append(text[pos:])
    return "".join(result)


def protected_spans(text: str) -> list[Span]:
    """Spans candidates must not touch: existing links and [[Header]] markers."""
    spans: list[Span] = []
    for pattern in (_MARKDOWN_LINK, _HTML_ANCHOR, _HEADER_MARKER):
        spans.extend(m.span() for m in pattern.finditer(text))
    return spans


def _overlaps(start: int, end: int, spans: Iterable[Span]) -> bool:
    return any(start < span_end and span_start < end for span_start, span_end in spans)


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def _on_word_boundary(text: str, start: int, end: int) -> bool:
    if start > 0 and _is_word_char(text[start - 1]) and _is_word_char(text[start]):
        return False
    if end < len(text) and _is_word_char(text[end]) and _is_word_char(text[end - 1]):
        return False
    return True


def find_free_occurrence(text: str, phrase: str, taken: list[Span]) -> Span | None:
    """First case-sensitive, word-bounded occurrence of phrase outside the taken spans."""
    start = text.find(phrase)
    while start != -1:
        end = start + len(phrase)
        if not _overlaps(start, end, taken) and _on_word_boundary(text, start, end):
            return start, end
        start = text.find(phrase, start + 1)
    return None


def inject_hyperlinks(
    text: str,
    candidates: list[LinkCandidate],
    locale: NamedLocale,
) -> str:
    """Wrap the first free occurrence of each candidate in a markdown search link.

    Args:
        text: Sanitized prose.
        candidates: Validated link candidates.
        locale: Anything with .name and .city, used for the search query.

    Returns:
        Prose with [text](url) links. Text outside the new links is unchanged.
    """
    text = sanitize_markdown_links(text)
    if not candidates or not text:
        return text

    taken = protected_spans(text)
    claimed: list[Span] = []
    seen: set[str] = set()

    # Longest first so "Joe's Pizza" is claimed before "Pizza"
    for candidate in sorted(candidates, key=lambda c: len(c.text), reverse=True):
        phrase = candidate.text
        if len(phrase) < MIN_CANDIDATE_LENGTH or phrase in seen or "[" in phrase or "]" in phrase:
            continue
        seen.add(phrase)

        span = find_free_occurrence(text, phrase, taken + claimed)
        if span is None:
            log.debug("link_candidate_skipped", text=phrase)
            continue
        claimed.append(span)

    if not claimed:
        return text

    parts: list[str] = []
    pos = 0
    for start, end in sorted(claimed):
        phrase = text[start:end]
        parts.append(text[pos:start])
        parts.append(f"[{phrase}]({build_link_url(phrase, locale.name, locale.city)})")
        pos = end
    parts.append(text[pos:])

    log.debug("hyperlinks_injected", count=len(claimed), candidates=len(candidates))
    return "".join(parts)
