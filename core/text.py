"""Plain-text helpers shared by the source normalisers."""

from __future__ import annotations

import re
import warnings

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

SUMMARY_MAX_CHARS = 500
ELLIPSIS = "..."

_WS_RE = re.compile(r"\s+")


def strip_html(text: str) -> str:
    """Drop markup and decode entities, leaving single-spaced text.

    Stray ``<`` and ``>`` that are not part of a tag are kept as text.
    """
    if not text:
        return ""
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        soup = BeautifulSoup(text, "html.parser")
    return collapse_whitespace(soup.get_text(separator=" "))


def collapse_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text or "").strip()


def clip_summary(text: str, limit: int = SUMMARY_MAX_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS
