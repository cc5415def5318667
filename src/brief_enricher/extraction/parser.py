# ABOUTME: Locates and parses the machine-readable JSON block in raw Gemini output.
# ABOUTME: Tolerates code fences, trailing commas and HTML entities; raises on anything else.

import html
import json
import re
from typing import Any

import structlog

log = structlog.get_logger()

# Fenced block whose body starts with an object; the json tag is optional
_FENCED_OBJECT = re.compile(r"```(?:json)?\s*(\{[\s\S]*?)```", re.IGNORECASE)
# Unfenced (or unterminated) object that opens with the categories key
_BARE_OBJECT = re.compile(r'\{\s*"categories"\s*:')


def locate_block(raw: str) -> str | None:
    """Find the best-effort machine-readable block anywhere in the response.

    Returns:
        The block text, or None when the response is prose only.
    """
    match = _FENCED_OBJECT.search(raw)
    if match:
        return match.group(1).strip()

    match = _BARE_OBJECT.search(raw)
    if match:
        return raw[match.start() :].strip()

    return None


def strip_markdown_fences(text: str) -> str:
    """Strip markdown code fences from LLM response.

    Gemini often wraps JSON responses in ```json ... ``` blocks.
    """
    pattern = r"^```(?:json)?\s*\n?(.*?)\n?```$"
    match = re.match(pattern, text.strip(), re.DOTALL)
    if match:
        return match.group(1).strip()
    return text.strip()


def fix_json_trailing_commas(text: str) -> str:
    """Remove trailing commas before } or ] (common LLM error)."""
    text = re.sub(r",\s*}", "}", text)
    text = re.sub(r",\s*]", "]", text)
    return text


def unescape_html_entities(data: Any) -> Any:
    """Recursively unescape HTML entities in parsed JSON data.

    LLMs sometimes return HTML-escaped content like &#39; instead of '.
    """
    if isinstance(data, str):
        return html.unescape(data)
    if isinstance(data, dict):
        return {k: unescape_html_entities(v) for k, v in data.items()}
    if isinstance(data, list):
        return [unescape_html_entities(item) for item in data]
    return data


def parse_block(block: str) -> dict[str, Any]:
    """Parse a located block into a dict.

    Text after the first complete JSON value is ignored, so an unfenced block
    followed by more prose still parses.

    Raises:
        ValueError: Empty block, invalid JSON (json.JSONDecodeError), nesting
            too deep to decode, or a top-level value that is not an object.
    """
    if not block or not block.strip():
        raise ValueError("machine-readable block is empty")

    cleaned = fix_json_trailing_commas(strip_markdown_fences(block))

    try:
        data, _ = json.JSONDecoder().raw_decode(cleaned)
        if not isinstance(data, dict):
            raise ValueError(f"machine-readable block is a {type(data).__name__}, not an object")
        return unescape_html_entities(data)
    except json.JSONDecodeError as e:
        log.warning(
            "json_parse_failed",
            error=str(e),
            block_preview=cleaned[:500],
        )
        raise
    except RecursionError as e:
        log.warning("json_too_deep", block_preview=cleaned[:500])
        raise ValueError("machine-readable block is nested too deeply") from e
