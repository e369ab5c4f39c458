"""Document storage capability consumed by the search engine.

``DocumentStore`` is the interface the engine depends on; the engine never
touches a session directly. ``DocumentRepository`` implements it on top of
an SQLAlchemy ``AsyncSession`` and the PostgreSQL ``search_vector`` index.
Each method is a single round-trip; failures propagate to the caller.
"""

from __future__ import annotations

from typing import Protocol, assert_never

from sqlalchemy import ColumnElement, UnaryExpression, func, literal_column, select
from sqlalchemy.ext.asyncio import AsyncSession

from legaldocs.config import get_settings
from legaldocs.constants import EXTRACTED_TEXT_KEY, SortKey
from legaldocs.models import Document
from legaldocs.search.filters import SearchFilters
from legaldocs.search.matcher import TextMatch
from legaldocs.search.schemas import CandidateDocument


class DocumentStore(Protocol):
    """Read access to documents and their full-text index."""

    async def index_match(self, tsquery_expr: str) -> set[int]:
        """Return ids of documents whose search vector matches the expression."""
        ...

    async def count_documents(self, filters: SearchFilters, text_match: TextMatch | None) -> int:
        """Count documents passing the filters and text predicate."""
        ...

    async def fetch_documents(
        self,
        filters: SearchFilters,
        text_match: TextMatch | None,
        sort_by: SortKey,
        offset: int,
        limit: int,
    ) -> list[CandidateDocument]:
        """Return one sorted slice of the matching documents."""
        ...


def order_by_clauses(sort_by: SortKey) -> list[UnaryExpression]:
    """Map a sort key to ORDER BY clauses.

    Relevance is ordered newest first here; the engine re-ranks the fetched
    page afterwards. ``document_id`` breaks ties so paging is stable.
    """
    size = func.coalesce(Document.file_size, 0)
    match sort_by:
        case SortKey.RELEVANCE | SortKey.DATE_DESC:
            return [Document.uploaded_at.desc(), Document.document_id.desc()]
        case SortKey.DATE_ASC:
            return [Document.uploaded_at.asc(), Document.document_id.asc()]
        case SortKey.SIZE_DESC:
            return [size.desc(), Document.document_id.desc()]
        case SortKey.SIZE_ASC:
            return [size.asc(), Document.document_id.asc()]
        case _:
            assert_never(sort_by)


def extracted_text(document: Document) -> str | None:
    """Return the OCR text stored in a document's metadata, if any."""
    metadata = document.doc_metadata
    if not isinstance(metadata, dict):
        return None
    text = metadata.get(EXTRACTED_TEXT_KEY)
    return text if isinstance(text, str) and text else None


def to_candidate(document: Document) -> CandidateDocument:
    return CandidateDocument(
        document_id=document.document_id,
        document_name=document.document_name,
        document_type=document.document_type,
        folder_id=document.folder_id,
        tags=list(document.tags or []),
        uploaded_at=document.uploaded_at,
        file_size=document.file_size,
        mime_type=document.mime_type,
        extracted_text=extracted_text(document),
    )


class DocumentRepository:
    """PostgreSQL-backed DocumentStore.

    Args:
        session: An async SQLAlchemy session for database queries.
        fts_config: Text search configuration for ``to_tsquery``; defaults
            to the ``FTS_CONFIG`` setting.
    """

    def __init__(self, session: AsyncSession, fts_config: str | None = None) -> None:
        self._session = session
        self._fts_config = fts_config or get_settings().FTS_CONFIG

    async def index_match(self, tsquery_expr: str) -> set[int]:
        if not tsquery_expr:
            return set()
        # The expression is bound as a parameter; only the validated config name is inlined
        tsquery = func.to_tsquery(literal_column(f"'{self._fts_config}'"), tsquery_expr)
        stmt = select(Document.document_id).where(Document.search_vector.op("@@")(tsquery))
        result = await self._session.execute(stmt)
        return set(result.scalars().all())

    async def count_documents(self, filters: SearchFilters, text_match: TextMatch | None) -> int:
        stmt = select(func.count()).select_from(Document).where(*self._where(filters, text_match))
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def fetch_documents(
        self,
        filters: SearchFilters,
        text_match: TextMatch | None,
        sort_by: SortKey,
        offset: int,
        limit: int,
    ) -> list[CandidateDocument]:
        stmt = (
            select(Document)
            .where(*self._where(filters, text_match))
            .order_by(*order_by_clauses(sort_by))
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [to_candidate(document) for document in result.scalars().all()]

    @staticmethod
    def _where(filters: SearchFilters, text_match: TextMatch | None) -> list[ColumnElement[bool]]:
        clauses = filters.clauses()
        if text_match is not None:
            clauses.append(text_match.clause())
        return clauses
