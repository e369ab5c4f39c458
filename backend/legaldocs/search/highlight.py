"""Term highlighting and snippet extraction for search results.

Highlighting wraps matches in ``<mark>`` tags while preserving the original
casing. All terms are matched in a single regex pass, longest first, so a
term that happens to occur inside an earlier marker (``mark``) or inside a
longer term is never wrapped twice.
"""

from __future__ import annotations

import re
from typing import Any

from legaldocs.constants import HIGHLIGHT_END, HIGHLIGHT_START
from legaldocs.search.params import get_search_params


def _unique_terms(terms: list[str]) -> list[str]:
    """Deduplicate terms case-insensitively, dropping single characters."""
    seen: set[str] = set()
    unique: list[str] = []
    for term in terms:
        key = term.strip().lower()
        if len(key) > 1 and key not in seen:
            seen.add(key)
            unique.append(key)
    return unique


def highlight_text(text: str | None, terms: list[str]) -> str | None:
    """Wrap each case-insensitive occurrence of ``terms`` in ``text``.

    Returns the text unchanged when it is empty or there are no terms.
    """
    if not text:
        return text
    unique = _unique_terms(terms)
    if not unique:
        return text

    alternation = "|".join(re.escape(term) for term in sorted(unique, key=len, reverse=True))
    pattern = re.compile(alternation, re.IGNORECASE)
    return pattern.sub(lambda match: f"{HIGHLIGHT_START}{match.group(0)}{HIGHLIGHT_END}", text)


def extract_snippet(
    text: str | None,
    tokens: list[str],
    terms: list[str],
    params: dict[str, Any] | None = None,
) -> str | None:
    """Cut a highlighted excerpt of ``text`` around the first matching token.

    Tokens are tried in query order; the first one found anywhere in the
    text decides the window, which starts ``snippet_lead`` characters
    before the hit and spans at most ``snippet_length`` characters.

    Args:
        text: Extracted document text (OCR output), possibly None.
        tokens: Lowercase query tokens used to locate the window.
        terms: Normalized terms used to highlight the window.
        params: Search parameters; loaded from settings when omitted.

    Returns:
        The highlighted snippet, or None when there is no text or no hit.
    """
    if not text or not tokens:
        return None
    if params is None:
        params = get_search_params()

    for token in tokens:
        hit = re.search(re.escape(token), text, re.IGNORECASE)
        if hit is None:
            continue
        start = max(0, hit.start() - int(params["snippet_lead"]))
        window = text[start : start + int(params["snippet_length"])]
        return highlight_text(window, terms)
    return None
