"""Hybrid text matching: full-text index hits OR metadata substring match.

The tsquery path reaches body text and stemmed forms through
``search_vector``. The substring path checks name, type and tags directly,
so it also sees rows the index has not caught up with. A document matches
when either path accepts it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sqlalchemy import ColumnElement, func, or_, select

from legaldocs.models import Document
from legaldocs.search.query_preprocessor import QueryAnalysis
from legaldocs.search.schemas import CandidateDocument

if TYPE_CHECKING:
    from legaldocs.search.store import DocumentStore

logger = logging.getLogger(__name__)


def substring_matches(document: CandidateDocument, needle: str) -> bool:
    """Case-insensitive substring test against name, type and every tag."""
    needle = needle.lower()
    if needle in document.document_name.lower():
        return True
    if document.document_type and needle in document.document_type.lower():
        return True
    return any(needle in tag.lower() for tag in document.tags)


@dataclass(frozen=True)
class TextMatch:
    """Text predicate for a non-blank query.

    Attributes:
        substring: The stripped raw query, matched literally (no escaping).
        index_ids: Document ids returned by the full-text index.
    """

    substring: str
    index_ids: frozenset[int] = field(default_factory=frozenset)

    def matches(self, document: CandidateDocument) -> bool:
        """In-process form of ``clause()``, for stores that hold documents in memory."""
        return document.document_id in self.index_ids or substring_matches(document, self.substring)

    def clause(self) -> ColumnElement[bool]:
        """Render the predicate as a SQL clause over ``documents``."""
        tag = func.unnest(Document.tags).table_valued("tag").render_derived(name="document_tags")
        tag_match = select(tag.c.tag).where(tag.c.tag.icontains(self.substring, autoescape=True)).exists()
        conditions = [
            Document.document_name.icontains(self.substring, autoescape=True),
            Document.document_type.icontains(self.substring, autoescape=True),
            tag_match,
        ]
        if self.index_ids:
            conditions.append(Document.document_id.in_(sorted(self.index_ids)))
        return or_(*conditions)


class HybridMatcher:
    """Builds the TextMatch for a query, consulting the full-text index.

    Args:
        store: Storage capability providing ``index_match``.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def resolve(self, analysis: QueryAnalysis) -> TextMatch | None:
        """Return the text predicate for ``analysis``.

        None means the query is blank and only structural filters apply.
        A query without usable terms (e.g. a single character) skips the
        index and relies on the substring path alone.
        """
        if analysis.is_blank:
            return None

        index_ids: frozenset[int] = frozenset()
        if analysis.tsquery_expr:
            index_ids = frozenset(await self._store.index_match(analysis.tsquery_expr))
            logger.debug("Index matched %d documents for %r", len(index_ids), analysis.tsquery_expr)

        return TextMatch(substring=analysis.stripped, index_ids=index_ids)
