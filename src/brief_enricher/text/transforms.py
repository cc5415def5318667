# ABOUTME: Ordered, idempotent text rewrite pipelines for prose and email teasers.
# ABOUTME: Each rule is a named pure function; pipelines repeat until the text is stable.

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass


def _until_stable(fn: Callable[[str], str], text: str) -> str:
    """Apply fn until it stops changing the text.

    Every rule here either shortens the text, removes a dash character, or
    upper-cases the first letter, so the loop always terminates.
    """
    while True:
        result = fn(text)
        if result == text:
            return result
        text = result


@dataclass(frozen=True)
class TransformRule:
    """A named rewrite step. Calling it is idempotent."""

    name: str
    fn: Callable[[str], str]

    def __call__(self, text: str) -> str:
        return _until_stable(self.fn, text)


@dataclass(frozen=True)
class TransformPipeline:
    """An ordered list of rules, applied in sequence until a full pass is a no-op."""

    name: str
    rules: tuple[TransformRule, ...]

    def apply_once(self, text: str) -> str:
        for rule in self.rules:
            text = rule(text)
        return text

    def __call__(self, text: str) -> str:
        return _until_stable(self.apply_once, text)

    @property
    def rule_names(self) -> list[str]:
        return [rule.name for rule in self.rules]


def _sub_all(patterns: Iterable[tuple[re.Pattern[str], str]]) -> Callable[[str], str]:
    compiled = tuple(patterns)

    def apply(text: str) -> str:
        for pattern, replacement in compiled:
            text = pattern.sub(replacement, text)
        return text

    return apply


# --- Prose sanitizer rules ---------------------------------------------------

_CODE_BLOCK = re.compile(r"```[\s\S]*?```")
# Unterminated fence or bare JSON object trailing the prose
_TRAILING_JSON = re.compile(r'(?:```(?:json)?\s*)?\{\s*"?categories"?[\s\S]*$', re.IGNORECASE)
_BOLD = re.compile(r"\*\*([^*\n]+)\*\*")
_ITALIC = re.compile(r"\*([^*\n]+)\*")
_HEADING_MARKER = re.compile(r"^#+[ \t]+", re.MULTILINE)
_TEASER_LABEL_LINE = re.compile(r"^(?:subject|email)[_ ]teaser:.*$", re.IGNORECASE | re.MULTILINE)
_LEADING_LABEL = re.compile(r"\A\s*(?:daily brief|look ahead)[:\s]*[^.!?\n]*[.!?\n]\s*", re.IGNORECASE)

_CITATIONS = (
    (re.compile(r"\.\s*\(\d{1,2}\)"), "."),  # ". (1)" / ".(2)"
    (re.compile(r"[ \t]*\(\d{1,2}\)"), ""),  # inline (1)
    (re.compile(r"\.\("), "."),  # ".(" grounding artifact
    (re.compile(r"\([ \t]*\)"), ""),  # ()
    (re.compile(r"\([ \t]*$", re.MULTILINE), ""),  # orphaned "(" at end of line
)

_DASHES = (
    (re.compile(r"[ \t]*—[ \t]*"), " - "),
    (re.compile(r"–"), "-"),
)

_EXTRA_NEWLINES = re.compile(r"\n{3,}")


def remove_code_blocks(text: str) -> str:
    """Remove fenced blocks, including the embedded ```json machine-readable block."""
    return _CODE_BLOCK.sub("", text)


def remove_trailing_json(text: str) -> str:
    """Remove an unfenced or unterminated categories object trailing the prose."""
    return _TRAILING_JSON.sub("", text)


def strip_emphasis(text: str) -> str:
    """**bold** -> bold, *italic* -> italic. [[Header]] markers are untouched."""
    text = _BOLD.sub(r"\1", text)
    return _ITALIC.sub(r"\1", text)


def strip_heading_markers(text: str) -> str:
    return _HEADING_MARKER.sub("", text)


def strip_teaser_labels(text: str) -> str:
    """Drop 'SUBJECT TEASER: ...' lines the model sometimes echoes into prose."""
    return _TEASER_LABEL_LINE.sub("", text)


def strip_leading_label(text: str) -> str:
    """Drop a 'Daily Brief: ...' / 'Look Ahead: ...' title line at the very start."""
    return _LEADING_LABEL.sub("", text, count=1)


strip_citation_artifacts = _sub_all(_CITATIONS)
strip_citation_artifacts.__doc__ = "Clean search-grounding citation leftovers like '.(', '(1)' and '()'."

normalize_dashes = _sub_all(_DASHES)
normalize_dashes.__doc__ = "Em dash -> ' - ', en dash -> '-'."


def collapse_newlines(text: str) -> str:
    return _EXTRA_NEWLINES.sub("\n\n", text)


def trim(text: str) -> str:
    return text.strip()


PROSE_RULES: tuple[TransformRule, ...] = (
    TransformRule("remove_code_blocks", remove_code_blocks),
    TransformRule("remove_trailing_json", remove_trailing_json),
    TransformRule("strip_emphasis", strip_emphasis),
    TransformRule("strip_heading_markers", strip_heading_markers),
    TransformRule("strip_teaser_labels", strip_teaser_labels),
    TransformRule("strip_leading_label", strip_leading_label),
    TransformRule("strip_citation_artifacts", strip_citation_artifacts),
    TransformRule("normalize_dashes", normalize_dashes),
    TransformRule("collapse_newlines", collapse_newlines),
    TransformRule("trim", trim),
)

PROSE_SANITIZER = TransformPipeline("prose_sanitizer", PROSE_RULES)


# --- Teaser cleanup rules ----------------------------------------------------

# Sentence start: beginning of text or right after ". " / "! "
_SENTENCE_START = r"(?:^|(?<=[.!]\s))"

_FILLERS = re.compile(
    _SENTENCE_START + r"(?:Plus,?\s|Also,?\s|And\s|Meanwhile,?\s|In addition,?\s)",
    re.IGNORECASE,
)

# Every replacement is shorter than what it replaces.
DEFERRED_TENSE_REWRITES: tuple[tuple[str, str], ...] = (
    (r"\bstarts?\s+tomorrow\b", "now live"),
    (r"\bopens?\s+tomorrow\b", "just opened"),
    (r"\bbegins?\s+tomorrow\b", "now live"),
    (r"\blaunches\s+tomorrow\b", "finally launches"),
    (r"\bwill\s+open\b", "opens"),
    (r"\bwill\s+launch\b", "launches"),
    (r"\bis\s+expected\s+to\b", ""),
    (r"\bbegins?\s+next\s+week\b", "now live"),
)

_DEFERRED_TENSE = tuple(
    (re.compile(pattern, re.IGNORECASE), replacement)
    for pattern, replacement in DEFERRED_TENSE_REWRITES
)

_BOILERPLATE_OPENERS = re.compile(
    _SENTENCE_START
    + r"(?:See what[’']s on at\s+|Check out\s+|Catch\s+(?:the\s+)?|Don[’']t miss\s+)",
    re.IGNORECASE,
)

_MULTI_SPACE = re.compile(r"\s{2,}")


def strip_fillers(text: str) -> str:
    """'Plus, X.' -> 'X.' at every sentence start."""
    return _FILLERS.sub("", text)


rewrite_deferred_tense = _sub_all(_DEFERRED_TENSE)
rewrite_deferred_tense.__doc__ = "'starts tomorrow' -> 'now live', 'will open' -> 'opens', etc."


def strip_boilerplate_openers(text: str) -> str:
    """'Check out X' -> 'X', 'Catch the X' -> 'X'."""
    return _BOILERPLATE_OPENERS.sub("", text)


def collapse_whitespace(text: str) -> str:
    return _MULTI_SPACE.sub(" ", text).strip()


def capitalize_first(text: str) -> str:
    if text and text[0].islower():
        return text[0].upper() + text[1:]
    return text


TEASER_RULES: tuple[TransformRule, ...] = (
    TransformRule("strip_fillers", strip_fillers),
    TransformRule("rewrite_deferred_tense", rewrite_deferred_tense),
    TransformRule("strip_boilerplate_openers", strip_boilerplate_openers),
    TransformRule("collapse_whitespace", collapse_whitespace),
    TransformRule("capitalize_first", capitalize_first),
)

TEASER_CLEANER = TransformPipeline("teaser_cleanup", TEASER_RULES)


def sanitize_prose(text: str) -> str:
    """Turn raw model output into display prose. Idempotent."""
    return PROSE_SANITIZER(text)


def clean_teaser(text: str) -> str:
    """Fix filler, deferred tense and boilerplate in an email teaser. Idempotent."""
    return TEASER_CLEANER(text)
