"""Tests for the PostgreSQL DocumentRepository.

Statements are captured from a mocked AsyncSession and compiled with the
PostgreSQL dialect, so no real database is required.
"""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from legaldocs.constants import SortKey
from legaldocs.models import Document
from legaldocs.search.filters import SearchFilters
from legaldocs.search.matcher import TextMatch
from legaldocs.search.schemas import CandidateDocument
from legaldocs.search.store import DocumentRepository, extracted_text, order_by_clauses, to_candidate

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_mock_session(scalars: list | None = None, scalar_one=None):
    """Build a mock AsyncSession whose execute() returns the given values."""
    session = AsyncMock()
    result_mock = MagicMock()
    result_mock.scalars.return_value.all.return_value = scalars if scalars is not None else []
    result_mock.scalar_one.return_value = scalar_one
    session.execute = AsyncMock(return_value=result_mock)
    return session


def _executed_sql(session) -> tuple[str, dict]:
    stmt = session.execute.await_args.args[0]
    compiled = stmt.compile(dialect=postgresql.dialect())
    return str(compiled), compiled.params


def _make_orm_document(**overrides) -> Document:
    values = {
        "document_id": 1,
        "document_name": "Lease Agreement",
        "document_type": "contract",
        "folder_id": 2,
        "tags": ["lease"],
        "uploaded_at": datetime(2024, 3, 1, tzinfo=UTC),
        "file_size": 2048,
        "mime_type": "application/pdf",
        "doc_metadata": {"ocr_text": "Indemnity clause"},
    }
    values.update(overrides)
    return Document(**values)


# ---------------------------------------------------------------------------
# 1. Index lookup
# ---------------------------------------------------------------------------


class TestIndexMatch:
    @pytest.mark.asyncio
    async def test_returns_id_set(self):
        session = _make_mock_session(scalars=[3, 5, 3])
        repo = DocumentRepository(session, fts_config="arabic")

        ids = await repo.index_match("'lease'")

        assert ids == {3, 5}
        session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_expression_is_bound_not_inlined(self):
        session = _make_mock_session(scalars=[])
        repo = DocumentRepository(session, fts_config="arabic")

        await repo.index_match("'contract' & '\\&'")

        sql, params = _executed_sql(session)
        assert "documents.search_vector @@ to_tsquery('arabic'" in sql
        assert "contract" not in sql
        assert "'contract' & '\\&'" in params.values()

    @pytest.mark.asyncio
    async def test_empty_expression_skips_database(self):
        session = _make_mock_session()
        repo = DocumentRepository(session, fts_config="arabic")

        assert await repo.index_match("") == set()
        session.execute.assert_not_awaited()

    def test_default_config_from_settings(self):
        repo = DocumentRepository(_make_mock_session())
        assert repo._fts_config == "arabic"


# ---------------------------------------------------------------------------
# 2. Count and fetch
# ---------------------------------------------------------------------------


class TestCountAndFetch:
    @pytest.mark.asyncio
    async def test_count_applies_filters_and_text(self):
        session = _make_mock_session(scalar_one=7)
        repo = DocumentRepository(session, fts_config="arabic")

        total = await repo.count_documents(
            SearchFilters(document_type="memo"),
            TextMatch(substring="lease", index_ids=frozenset({4})),
        )

        assert total == 7
        sql, params = _executed_sql(session)
        assert sql.startswith("SELECT count(*)")
        assert "documents.document_type =" in sql
        assert "documents.document_id IN" in sql
        assert "memo" in params.values()

    @pytest.mark.asyncio
    async def test_count_without_text_match(self):
        session = _make_mock_session(scalar_one=0)
        repo = DocumentRepository(session, fts_config="arabic")

        await repo.count_documents(SearchFilters(), None)

        sql, _ = _executed_sql(session)
        assert "WHERE" not in sql

    @pytest.mark.asyncio
    async def test_fetch_orders_pages_and_maps(self):
        session = _make_mock_session(scalars=[_make_orm_document()])
        repo = DocumentRepository(session, fts_config="arabic")

        docs = await repo.fetch_documents(SearchFilters(), None, SortKey.SIZE_DESC, offset=10, limit=5)

        assert docs == [
            CandidateDocument(
                document_id=1,
                document_name="Lease Agreement",
                document_type="contract",
                folder_id=2,
                tags=["lease"],
                uploaded_at=datetime(2024, 3, 1, tzinfo=UTC),
                file_size=2048,
                mime_type="application/pdf",
                extracted_text="Indemnity clause",
            )
        ]
        sql, params = _executed_sql(session)
        order_by = sql.split("ORDER BY", 1)[1]
        assert order_by.lstrip().startswith("coalesce(documents.file_size")
        assert "DESC, documents.document_id DESC" in order_by
        assert "LIMIT" in sql
        assert "OFFSET" in sql
        assert 5 in params.values()
        assert 10 in params.values()


# ---------------------------------------------------------------------------
# 3. Sort dispatch and mapping helpers
# ---------------------------------------------------------------------------


class TestOrderBy:
    @pytest.mark.parametrize(
        ("sort_by", "expected"),
        [
            (SortKey.RELEVANCE, "documents.uploaded_at DESC"),
            (SortKey.DATE_DESC, "documents.uploaded_at DESC"),
            (SortKey.DATE_ASC, "documents.uploaded_at ASC"),
            (SortKey.SIZE_DESC, "coalesce(documents.file_size, :coalesce_1) DESC"),
            (SortKey.SIZE_ASC, "coalesce(documents.file_size, :coalesce_1) ASC"),
        ],
    )
    def test_every_sort_key_has_ordering(self, sort_by, expected):
        clauses = order_by_clauses(sort_by)
        assert str(clauses[0]) == expected
        assert "documents.document_id" in str(clauses[1])

    def test_unknown_sort_key_fails_fast(self):
        with pytest.raises(ValueError):
            SortKey("newest")


class TestExtractedText:
    def test_reads_ocr_text(self):
        assert extracted_text(_make_orm_document()) == "Indemnity clause"

    @pytest.mark.parametrize("metadata", [None, {}, {"ocr_text": ""}, {"ocr_text": 42}, ["not", "a", "dict"]])
    def test_missing_or_invalid_is_none(self, metadata):
        assert extracted_text(_make_orm_document(doc_metadata=metadata)) is None

    def test_null_tags_become_empty_list(self):
        assert to_candidate(_make_orm_document(tags=None)).tags == []
