"""Pydantic v2 schemas for document search.

Defines the data structures flowing through the search pipeline:
- SearchRequest: Query text, structural filters, paging and sort order
- CandidateDocument: Read-only view of a stored document
- SearchResult: A page document decorated with rank, highlights and snippet
- PaginatedSearchResult: One page of results with paging metadata
"""

from __future__ import annotations

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from legaldocs.constants import SortKey


class SearchRequest(BaseModel):
    """Parameters of a single search.

    Attributes:
        query: Raw query text. Blank means no text filter.
        folder_id: Restrict to one folder.
        document_type: Restrict to one document type (exact match).
        start_date: Earliest upload time (inclusive).
        end_date: Last upload day (inclusive of the whole day).
        page: 1-based page number.
        page_size: Maximum number of results on the page.
        sort_by: Result ordering.
    """

    model_config = ConfigDict(frozen=True)

    query: str = ""
    folder_id: int | None = None
    document_type: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, gt=0)
    sort_by: SortKey = SortKey.RELEVANCE

    @field_validator("query", mode="before")
    @classmethod
    def _none_query_is_blank(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("document_type", mode="before")
    @classmethod
    def _empty_type_is_unset(cls, value: object) -> object:
        return None if value == "" else value


class CandidateDocument(BaseModel):
    """A stored document as seen by the search core.

    ``extracted_text`` holds OCR or other extracted body text when the
    document has any; it is only used for snippets.
    """

    model_config = ConfigDict(frozen=True)

    document_id: int
    document_name: str
    document_type: str | None = None
    folder_id: int | None = None
    tags: list[str] = Field(default_factory=list)
    uploaded_at: datetime
    file_size: int | None = None
    mime_type: str | None = None
    extracted_text: str | None = None


class SearchResult(BaseModel):
    """A single search result.

    Attributes:
        document: The matched document.
        rank: Field-weighted relevance score (never negative).
        highlighted_name: Document name with query terms wrapped in <mark>.
        highlighted_type: Highlighted document type, or None without a type.
        snippet: Highlighted excerpt of extracted text around the first
            matching term, or None.
    """

    model_config = ConfigDict(frozen=True)

    document: CandidateDocument
    rank: float = Field(default=0.0, ge=0.0)
    highlighted_name: str
    highlighted_type: str | None = None
    snippet: str | None = None


class PaginatedSearchResult(BaseModel):
    """One page of search results with the unpaginated total."""

    model_config = ConfigDict(frozen=True)

    total_count: int
    current_page: int
    page_size: int
    results: list[SearchResult] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_previous_page(self) -> bool:
        return self.current_page > 1

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages
