# @TASK S3-T3.1 - Document search API endpoints
# @TEST tests/test_api_search.py

"""Document search API endpoints.

Provides:
- ``GET /documents/search`` -- Filtered, paginated, sortable search with
  rank, highlighted name/type and OCR snippet per result.
- ``GET /documents/search/simple`` -- Plain list of matching documents.

Storage failures are logged and reported as 503; the search pipeline itself
never fails on query content.
"""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from legaldocs.config import get_settings
from legaldocs.constants import SortKey
from legaldocs.database import get_db
from legaldocs.search.engine import DocumentSearchEngine
from legaldocs.search.schemas import CandidateDocument, SearchRequest
from legaldocs.search.store import DocumentRepository
from legaldocs.utils.datetime_utils import datetime_from_iso, datetime_to_iso

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["search"])

_settings = get_settings()

_UNAVAILABLE_DETAIL = "Search is temporarily unavailable. Please try again later."


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class DocumentResponse(BaseModel):
    """Document metadata returned by search."""

    document_id: int
    document_name: str
    document_type: str | None = None
    folder_id: int | None = None
    tags: list[str] = []
    uploaded_at: str | None = None
    file_size: int | None = None
    mime_type: str | None = None

    @classmethod
    def from_candidate(cls, document: CandidateDocument) -> DocumentResponse:
        return cls(
            document_id=document.document_id,
            document_name=document.document_name,
            document_type=document.document_type,
            folder_id=document.folder_id,
            tags=document.tags,
            uploaded_at=datetime_to_iso(document.uploaded_at),
            file_size=document.file_size,
            mime_type=document.mime_type,
        )


class SearchResultResponse(BaseModel):
    """A single ranked and highlighted search result."""

    document: DocumentResponse
    rank: float
    highlighted_name: str
    highlighted_type: str | None = None
    snippet: str | None = None


class PaginatedSearchResponse(BaseModel):
    """One page of search results with paging metadata."""

    results: list[SearchResultResponse]
    query: str
    sort_by: str
    total_count: int
    current_page: int
    page_size: int
    total_pages: int
    has_previous_page: bool
    has_next_page: bool


# ---------------------------------------------------------------------------
# Engine factory (extracted for easy mocking in tests)
# ---------------------------------------------------------------------------


def _build_search_engine(session: AsyncSession) -> DocumentSearchEngine:
    """Create a DocumentSearchEngine backed by the database."""
    return DocumentSearchEngine(store=DocumentRepository(session))


def _parse_date(value: str | None, name: str) -> datetime | None:
    """Parse a date query parameter, answering 400 when malformed."""
    try:
        return datetime_from_iso(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid {name}: {value!r}") from e


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/search", response_model=PaginatedSearchResponse)
async def search_documents(
    q: str = Query("", description="Search query (blank = filters only)"),  # noqa: B008
    folder_id: int | None = Query(None, description="Filter by folder id"),  # noqa: B008
    document_type: str | None = Query(None, description="Filter by document type"),  # noqa: B008
    start_date: str | None = Query(None, description="Uploaded on or after (YYYY-MM-DD)"),  # noqa: B008
    end_date: str | None = Query(None, description="Uploaded on or before, whole day (YYYY-MM-DD)"),  # noqa: B008
    page: int = Query(1, ge=1, description="1-based page number"),  # noqa: B008
    page_size: int = Query(  # noqa: B008
        _settings.SEARCH_DEFAULT_PAGE_SIZE,
        ge=1,
        le=_settings.SEARCH_MAX_PAGE_SIZE,
        description="Results per page",
    ),
    sort_by: SortKey = Query(SortKey.RELEVANCE, description="Result ordering"),  # noqa: B008
    db: AsyncSession = Depends(get_db),  # noqa: B008
) -> PaginatedSearchResponse:
    """Search documents with structural filters, paging and sorting.

    Args:
        q: Query text matched against the full-text index and against
            name, type and tags.
        folder_id: Optional folder filter.
        document_type: Optional exact document type filter.
        start_date: Optional inclusive lower bound on upload date.
        end_date: Optional upper bound on upload date, inclusive of the day.
        page: Page number (default 1).
        page_size: Results per page.
        sort_by: relevance, date_desc, date_asc, size_desc or size_asc.
        db: Injected async database session.

    Returns:
        PaginatedSearchResponse with the page results and totals.
    """
    logger.info(
        "Search request: query=%r, folder=%s, type=%s, page=%d, page_size=%d, sort=%s",
        q,
        folder_id,
        document_type,
        page,
        page_size,
        sort_by.value,
    )

    request = SearchRequest(
        query=q,
        folder_id=folder_id,
        document_type=document_type,
        start_date=_parse_date(start_date, "start_date"),
        end_date=_parse_date(end_date, "end_date"),
        page=page,
        page_size=page_size,
        sort_by=sort_by,
    )

    engine = _build_search_engine(db)
    try:
        result = await engine.search(request)
    except (SQLAlchemyError, OSError) as e:
        logger.exception("Document search failed for query %r", q)
        raise HTTPException(status_code=503, detail=_UNAVAILABLE_DETAIL) from e

    return PaginatedSearchResponse(
        results=[
            SearchResultResponse(
                document=DocumentResponse.from_candidate(r.document),
                rank=r.rank,
                highlighted_name=r.highlighted_name,
                highlighted_type=r.highlighted_type,
                snippet=r.snippet,
            )
            for r in result.results
        ],
        query=q,
        sort_by=sort_by.value,
        total_count=result.total_count,
        current_page=result.current_page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        has_previous_page=result.has_previous_page,
        has_next_page=result.has_next_page,
    )


@router.get("/search/simple", response_model=list[DocumentResponse])
async def simple_search_documents(
    query: str = Query("", description="Search query"),  # noqa: B008
    db: AsyncSession = Depends(get_db),  # noqa: B008
) -> list[DocumentResponse]:
    """Return documents matching ``query`` in relevance order, without decoration."""
    if not query.strip():
        raise HTTPException(status_code=400, detail="Query parameter is required")

    logger.info("Simple search request: query=%r", query)

    engine = _build_search_engine(db)
    try:
        documents = await engine.simple_search(query)
    except (SQLAlchemyError, OSError) as e:
        logger.exception("Simple document search failed for query %r", query)
        raise HTTPException(status_code=503, detail=_UNAVAILABLE_DETAIL) from e

    return [DocumentResponse.from_candidate(document) for document in documents]
