# @TASK S2-T2.1 - Document search package

"""Document search: full-text index + substring hybrid with ranking."""

from legaldocs.search.engine import DocumentSearchEngine
from legaldocs.search.schemas import (
    CandidateDocument,
    PaginatedSearchResult,
    SearchRequest,
    SearchResult,
)
from legaldocs.search.store import DocumentRepository, DocumentStore

__all__ = [
    "CandidateDocument",
    "DocumentRepository",
    "DocumentSearchEngine",
    "DocumentStore",
    "PaginatedSearchResult",
    "SearchRequest",
    "SearchResult",
]
