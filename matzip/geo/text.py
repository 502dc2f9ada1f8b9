from __future__ import annotations

import html
import re

_TAG_RE = re.compile(r"<[^>]*>")
_SPACE_RE = re.compile(r"\s+")


def strip_markup(text: str | None) -> str:
    """Remove inline tags such as the ``<b>`` highlights in search titles."""
    return _TAG_RE.sub("", text or "")


def decode_html_entities(text: str | None) -> str:
    return html.unescape(text or "").replace("\xa0", " ")


def clean_text(text: str | None) -> str:
    """Strip markup, decode entities and collapse whitespace."""
    cleaned = decode_html_entities(strip_markup(text))
    return _SPACE_RE.sub(" ", cleaned).strip()
