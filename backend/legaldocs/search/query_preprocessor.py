"""Query preprocessing for document search.

Splits a raw search query into terms and builds the escaped AND-joined
expression handed to PostgreSQL ``to_tsquery``.
"""

from __future__ import annotations

import re
from typing import NamedTuple


class QueryAnalysis(NamedTuple):
    """Result of analyzing a search query.

    Attributes:
        original: The query string as received (``""`` for None).
        stripped: The query with surrounding whitespace removed; used for
            substring matching.
        tokens: Lowercased whitespace-split tokens, including single
            characters; used for ranking and snippet lookup.
        terms: Normalized terms (lowercase, length > 1); used for the
            full-text index and highlighting.
        tsquery_expr: AND-joined, escaped tsquery expression, or ``""``.
    """

    original: str
    stripped: str
    tokens: list[str]
    terms: list[str]
    tsquery_expr: str

    @property
    def is_blank(self) -> bool:
        return not self.stripped


# Characters with operator meaning inside a tsquery, plus the escape character
_TSQUERY_SPECIAL_RE = re.compile(r"([&|!():*'\\])")


def split_tokens(query: str | None) -> list[str]:
    """Split a query on whitespace into lowercase tokens."""
    if not query:
        return []
    return [token.lower() for token in query.split()]


def normalize_query(query: str | None) -> list[str]:
    """Turn a raw query into search terms.

    Tokens are lowercased and trimmed; blank and single-character tokens
    are dropped. Order and duplicates are preserved. Never raises: any
    input that yields no usable term returns an empty list.
    """
    return [token for token in split_tokens(query) if len(token) > 1]


def escape_tsquery_term(term: str) -> str:
    """Quote a single term so tsquery operators in it are literal text.

    ``r&d`` becomes ``'r\\&d'``; an embedded quote becomes ``\\'``.
    """
    return "'" + _TSQUERY_SPECIAL_RE.sub(r"\\\1", term) + "'"


def build_tsquery_expr(terms: list[str]) -> str:
    """Join escaped terms with the tsquery AND operator.

    Returns:
        An expression such as ``'contract' & 'lease'``, or an empty string
        when there are no terms (the index lookup is then skipped).
    """
    return " & ".join(escape_tsquery_term(term) for term in terms)


def analyze_query(query: str | None) -> QueryAnalysis:
    """Analyze a raw search query.

    Args:
        query: Raw query string; None and whitespace are treated as blank.

    Returns:
        QueryAnalysis with all fields populated. Blank queries produce
        empty token and term lists and an empty tsquery expression.
    """
    original = query or ""
    stripped = original.strip()
    terms = normalize_query(stripped)
    return QueryAnalysis(
        original=original,
        stripped=stripped,
        tokens=split_tokens(stripped),
        terms=terms,
        tsquery_expr=build_tsquery_expr(terms),
    )
