"""
Parsers for free-text model output.

Model answers are untrusted text: every parser bounds what it returns and
yields an empty value instead of raising, so callers can apply their own
fallback.
"""
from __future__ import annotations

import json
import re
from typing import Any

# "-", "•" or a single "*" (not markdown bold) followed by the item text.
_BULLET_RE = re.compile(r"^(?:[-•]|\*(?!\*))\s*(.+?)\s*$")
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_WRAPPING_QUOTES = "\"'“”‘’"


def parse_bullet_list(
    text: str | None,
    max_length: int | None = None,
    limit: int | None = None,
) -> list[str]:
    """
    Return the text of bullet lines, in order, without duplicates.

    Lines without a bullet marker (explanations, headings) are dropped, as
    are items of ``max_length`` characters or more.
    """
    items: list[str] = []
    for raw_line in (text or "").splitlines():
        match = _BULLET_RE.match(raw_line.strip())
        if not match:
            continue
        item = match.group(1).strip().strip(_WRAPPING_QUOTES).strip()
        if not item:
            continue
        if max_length is not None and len(item) >= max_length:
            continue
        if item in items:
            continue
        items.append(item)
        if limit is not None and len(items) >= limit:
            break
    return items


def clean_prose(text: str | None, max_chars: int | None = None) -> str:
    """Collapse a prose answer to one line, trimmed to ``max_chars``."""
    cleaned = re.sub(r"\s+", " ", text or "").strip().strip(_WRAPPING_QUOTES).strip()
    if max_chars is not None and len(cleaned) > max_chars:
        cleaned = cleaned[:max_chars].rstrip()
    return cleaned


def extract_json_object(text: str | None) -> dict[str, Any] | None:
    """Parse the outermost ``{...}`` blob in ``text``, or ``None``."""
    match = _JSON_OBJECT_RE.search(text or "")
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except (json.JSONDecodeError, ValueError):
        return None
    return parsed if isinstance(parsed, dict) else None
