"""Field-weighted relevance rank for a search result."""

from __future__ import annotations

from typing import Any

from legaldocs.search.params import get_search_params
from legaldocs.search.schemas import CandidateDocument


def compute_rank(
    document: CandidateDocument,
    tokens: list[str],
    params: dict[str, Any] | None = None,
) -> float:
    """Score a document against lowercase query tokens.

    Each token adds ``name_weight`` if it occurs in the name,
    ``type_weight`` if it occurs in the type and ``tag_weight`` if it
    occurs in any tag. Documents that only matched through body text in the
    full-text index score 0 and are still returned.
    """
    if not tokens:
        return 0.0
    if params is None:
        params = get_search_params()

    name = document.document_name.lower()
    doc_type = (document.document_type or "").lower()
    tags = [tag.lower() for tag in document.tags]

    rank = 0.0
    for token in tokens:
        if token in name:
            rank += params["name_weight"]
        if token in doc_type:
            rank += params["type_weight"]
        if any(token in tag for tag in tags):
            rank += params["tag_weight"]
    return rank
