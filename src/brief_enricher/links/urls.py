# ABOUTME: Search URL builders for link targets and story fallbacks.
# ABOUTME: All URLs are Google Search queries with the query fully percent-encoded.

import re
from urllib.parse import quote

GOOGLE_SEARCH_URL = "https://www.google.com/search?q="

_FIRST_PARENTHETICAL = re.compile(r"\s*\([^)]*\)")


def build_search_url(*terms: str) -> str:
    """Google Search URL for the space-joined terms."""
    query = " ".join(term.strip() for term in terms if term and term.strip())
    return GOOGLE_SEARCH_URL + quote(query, safe="")


def build_link_url(text: str, name: str, city: str) -> str:
    """Target for an injected link: '{text} {neighborhood} {city}'."""
    return build_search_url(text, name, city)


def build_fallback_url(entity: str, locale_name: str) -> str:
    """Fallback for a story: '{neighborhood} {entity}', minus the entity's first parenthetical."""
    return build_search_url(locale_name, _FIRST_PARENTHETICAL.sub("", entity, count=1))
