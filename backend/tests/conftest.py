# @TASK S0-T0.4 - Test configuration
import os
from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing application modules
os.environ.setdefault("DATABASE_URL", "postgresql+asyncpg://legaldocs:legaldocs@db:5432/legaldocs_test")
os.environ.setdefault("FTS_CONFIG", "arabic")

from legaldocs.constants import SortKey  # noqa: E402
from legaldocs.search.filters import SearchFilters  # noqa: E402
from legaldocs.search.matcher import TextMatch  # noqa: E402
from legaldocs.search.schemas import CandidateDocument  # noqa: E402

BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)


class InMemoryDocumentStore:
    """DocumentStore over a list of CandidateDocument, for engine tests.

    ``index_hits`` maps a tsquery expression to the ids the full-text index
    would return for it. Every call is recorded for assertions.
    """

    def __init__(
        self,
        documents: list[CandidateDocument],
        index_hits: dict[str, set[int]] | None = None,
    ) -> None:
        self.documents = list(documents)
        self.index_hits = index_hits or {}
        self.index_queries: list[str] = []
        self.fetch_calls: list[tuple[SortKey, int, int]] = []

    async def index_match(self, tsquery_expr: str) -> set[int]:
        self.index_queries.append(tsquery_expr)
        return set(self.index_hits.get(tsquery_expr, set()))

    def _matching(self, filters: SearchFilters, text_match: TextMatch | None) -> list[CandidateDocument]:
        return [
            d
            for d in self.documents
            if filters.matches(d) and (text_match is None or text_match.matches(d))
        ]

    async def count_documents(self, filters: SearchFilters, text_match: TextMatch | None) -> int:
        return len(self._matching(filters, text_match))

    async def fetch_documents(
        self,
        filters: SearchFilters,
        text_match: TextMatch | None,
        sort_by: SortKey,
        offset: int,
        limit: int,
    ) -> list[CandidateDocument]:
        self.fetch_calls.append((sort_by, offset, limit))
        docs = self._matching(filters, text_match)
        match sort_by:
            case SortKey.RELEVANCE | SortKey.DATE_DESC:
                docs.sort(key=lambda d: (d.uploaded_at, d.document_id), reverse=True)
            case SortKey.DATE_ASC:
                docs.sort(key=lambda d: (d.uploaded_at, d.document_id))
            case SortKey.SIZE_DESC:
                docs.sort(key=lambda d: (d.file_size or 0, d.document_id), reverse=True)
            case SortKey.SIZE_ASC:
                docs.sort(key=lambda d: (d.file_size or 0, d.document_id))
        return docs[offset : offset + limit]


@pytest.fixture
def make_document() -> Callable[..., CandidateDocument]:
    """Factory for CandidateDocument with sensible defaults.

    ``age_days`` sets ``uploaded_at`` that many days before BASE_TIME.
    """

    def _make(
        document_id: int,
        document_name: str = "Untitled",
        document_type: str | None = None,
        *,
        tags: list[str] | None = None,
        age_days: float = 0,
        file_size: int | None = None,
        folder_id: int | None = None,
        extracted_text: str | None = None,
    ) -> CandidateDocument:
        return CandidateDocument(
            document_id=document_id,
            document_name=document_name,
            document_type=document_type,
            folder_id=folder_id,
            tags=tags or [],
            uploaded_at=BASE_TIME - timedelta(days=age_days),
            file_size=file_size,
            extracted_text=extracted_text,
        )

    return _make


@pytest.fixture
def store_factory() -> Callable[..., InMemoryDocumentStore]:
    """Build an InMemoryDocumentStore from documents and index hits."""
    return InMemoryDocumentStore


@pytest.fixture
def mock_session() -> AsyncMock:
    """An AsyncSession stand-in; API tests never reach the database."""
    return AsyncMock()


@pytest_asyncio.fixture(scope="function")
async def test_app(mock_session: AsyncMock):
    """Provide the FastAPI app with the database dependency overridden."""
    from legaldocs.database import get_db
    from legaldocs.main import app

    async def override_get_db():
        yield mock_session

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client bound to the app."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
