# @TASK S2-T2.1 - Document search engine (index + substring hybrid)
# @TEST tests/test_search_engine.py

"""Document search engine.

Combines the PostgreSQL full-text index with a metadata substring fallback,
then counts, sorts and pages the matches in the store. Only the documents
on the returned page are ranked, highlighted and given a snippet.

When sorting by relevance, the page is first cut in upload-date order and
then re-ranked within itself, so relevance ordering is per page rather than
across the whole result set.
"""

from __future__ import annotations

import logging
from typing import Any

from legaldocs.config import get_settings
from legaldocs.constants import SortKey
from legaldocs.search.filters import SearchFilters
from legaldocs.search.highlight import extract_snippet, highlight_text
from legaldocs.search.matcher import HybridMatcher
from legaldocs.search.params import get_search_params
from legaldocs.search.query_preprocessor import QueryAnalysis, analyze_query
from legaldocs.search.schemas import (
    CandidateDocument,
    PaginatedSearchResult,
    SearchRequest,
    SearchResult,
)
from legaldocs.search.scoring import compute_rank
from legaldocs.search.store import DocumentStore

logger = logging.getLogger(__name__)


def rerank_by_relevance(results: list[SearchResult]) -> list[SearchResult]:
    """Order results by rank, newest upload first among equal ranks."""
    return sorted(results, key=lambda r: (r.rank, r.document.uploaded_at), reverse=True)


class DocumentSearchEngine:
    """Paginated, sortable document search.

    Args:
        store: Storage capability used for index lookups, counting and
            fetching pages.
        simple_page_size: Page size used by ``simple_search``; defaults to
            the ``SIMPLE_SEARCH_PAGE_SIZE`` setting.
    """

    def __init__(self, store: DocumentStore, simple_page_size: int | None = None) -> None:
        self._store = store
        self._matcher = HybridMatcher(store)
        self._simple_page_size = simple_page_size or get_settings().SIMPLE_SEARCH_PAGE_SIZE

    async def search(self, request: SearchRequest) -> PaginatedSearchResult:
        """Execute a search and return one page of decorated results.

        Steps:
        1. Analyze the query and resolve the hybrid text predicate
        2. Count all matches (filters + text, before paging)
        3. Fetch the requested page in store sort order
        4. Rank, highlight and snippet the page documents
        5. Re-rank the page for ``relevance`` with a non-blank query
        """
        analysis = analyze_query(request.query)
        filters = SearchFilters.from_request(request)
        text_match = await self._matcher.resolve(analysis)

        total = await self._store.count_documents(filters, text_match)
        offset = (request.page - 1) * request.page_size

        documents: list[CandidateDocument] = []
        if offset < total:
            documents = await self._store.fetch_documents(
                filters,
                text_match,
                request.sort_by,
                offset,
                request.page_size,
            )

        params = get_search_params()
        results = [self._decorate(document, analysis, params) for document in documents]

        if request.sort_by is SortKey.RELEVANCE and not analysis.is_blank:
            results = rerank_by_relevance(results)

        logger.debug(
            "Search %r: total=%d, page=%d, returned=%d, sort=%s",
            analysis.stripped,
            total,
            request.page,
            len(results),
            request.sort_by.value,
        )
        return PaginatedSearchResult(
            total_count=total,
            current_page=request.page,
            page_size=request.page_size,
            results=results,
        )

    async def simple_search(self, query: str | None) -> list[CandidateDocument]:
        """Search with default filters and return just the matched documents.

        A blank query returns an empty list rather than every document.
        """
        if not query or not query.strip():
            return []
        page = await self.search(SearchRequest(query=query, page_size=self._simple_page_size))
        return [result.document for result in page.results]

    @staticmethod
    def _decorate(
        document: CandidateDocument,
        analysis: QueryAnalysis,
        params: dict[str, Any],
    ) -> SearchResult:
        return SearchResult(
            document=document,
            rank=compute_rank(document, analysis.tokens, params),
            highlighted_name=highlight_text(document.document_name, analysis.terms) or "",
            highlighted_type=(
                highlight_text(document.document_type, analysis.terms)
                if document.document_type is not None
                else None
            ),
            snippet=extract_snippet(document.extracted_text, analysis.tokens, analysis.terms, params),
        )
