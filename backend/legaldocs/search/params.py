"""Centralized search parameter management.

Ranking weights and snippet window sizes have defaults here and can be
overridden per deployment through the ``SEARCH_PARAMS`` setting (a JSON
object in the environment), e.g.::

    SEARCH_PARAMS='{"name_weight": 2.0, "snippet_length": 300}'

Usage in search components::

    from legaldocs.search.params import get_search_params
    params = get_search_params()
    rank += params["name_weight"]
"""

from __future__ import annotations

import logging
from typing import Any

from legaldocs.config import get_settings

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_PARAMS: dict[str, float | int] = {
    # Rank
    "name_weight": 1.0,
    "type_weight": 0.5,
    "tag_weight": 0.3,
    # Snippet window (characters)
    "snippet_lead": 50,
    "snippet_length": 200,
}


def get_search_params() -> dict[str, Any]:
    """Return current search parameters, merging configured overrides with defaults.

    Unknown keys in the override are ignored so a typo cannot silently
    introduce a parameter nothing reads.
    """
    saved = get_settings().SEARCH_PARAMS
    merged: dict[str, Any] = {**DEFAULT_SEARCH_PARAMS}
    for key, value in saved.items():
        if key in DEFAULT_SEARCH_PARAMS:
            merged[key] = value
        else:
            logger.warning("Ignoring unknown search parameter: %s", key)
    return merged
