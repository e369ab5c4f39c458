"""Structural search filters: folder, document type and upload date range.

Filters are conjunctive and independent of text relevance. They are
rendered as SQLAlchemy clauses for the database store and can also be
evaluated against a CandidateDocument in process.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import ColumnElement

from legaldocs.models import Document
from legaldocs.search.schemas import CandidateDocument, SearchRequest

_ONE_DAY = timedelta(days=1)
_ONE_TICK = timedelta(microseconds=1)


def end_of_day(end_date: datetime) -> datetime:
    """Extend an end date so a ``<=`` comparison covers that entire day."""
    return end_date + _ONE_DAY - _ONE_TICK


@dataclass(frozen=True)
class SearchFilters:
    """Structural predicates that define the base candidate pool."""

    folder_id: int | None = None
    document_type: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @classmethod
    def from_request(cls, request: SearchRequest) -> SearchFilters:
        return cls(
            folder_id=request.folder_id,
            document_type=request.document_type,
            start_date=request.start_date,
            end_date=request.end_date,
        )

    @property
    def upload_deadline(self) -> datetime | None:
        """Inclusive upper bound on ``uploaded_at``, or None."""
        if self.end_date is None:
            return None
        return end_of_day(self.end_date)

    def clauses(self) -> list[ColumnElement[bool]]:
        """Return the WHERE clauses for the configured filters."""
        clauses: list[ColumnElement[bool]] = []
        if self.folder_id is not None:
            clauses.append(Document.folder_id == self.folder_id)
        if self.document_type:
            clauses.append(Document.document_type == self.document_type)
        if self.start_date is not None:
            clauses.append(Document.uploaded_at >= self.start_date)
        if self.end_date is not None:
            clauses.append(Document.uploaded_at <= self.upload_deadline)
        return clauses

    def matches(self, document: CandidateDocument) -> bool:
        """In-process form of ``clauses()``, evaluated against a single document."""
        if self.folder_id is not None and document.folder_id != self.folder_id:
            return False
        if self.document_type and document.document_type != self.document_type:
            return False
        if self.start_date is not None and document.uploaded_at < self.start_date:
            return False
        deadline = self.upload_deadline
        if deadline is not None and document.uploaded_at > deadline:
            return False
        return True
