# @TASK S0-T0.3 - PostgreSQL schema for documents and folders

import uuid
from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, TSVECTOR, UUID
from sqlalchemy.orm import Mapped, mapped_column

from legaldocs.database import Base


class Folder(Base):
    """Folder in the logical document tree."""

    __tablename__ = "folders"

    folder_id: Mapped[int] = mapped_column(primary_key=True)
    folder_name: Mapped[str] = mapped_column(String(255), nullable=False)
    parent_folder_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("folders.folder_id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class Document(Base):
    """A managed legal document.

    Versioning, locking and file storage columns are owned by the document
    service; search only reads name, type, tags, size, upload time, the
    ``ocr_text`` key of ``metadata`` and the ``search_vector`` index column.
    """

    __tablename__ = "documents"

    document_id: Mapped[int] = mapped_column(primary_key=True)
    folder_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("folders.folder_id", ondelete="SET NULL"), nullable=True
    )
    document_name: Mapped[str] = mapped_column(String(255), nullable=False)
    document_type: Mapped[str | None] = mapped_column(String(50), nullable=True)  # contract, memo, ...
    file_guid: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), default=uuid.uuid4)
    file_path: Mapped[str] = mapped_column(Text, default="")
    file_size: Mapped[int | None] = mapped_column(BigInteger, nullable=True)  # bytes
    mime_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    current_version: Mapped[int] = mapped_column(Integer, default=1)
    is_locked: Mapped[bool] = mapped_column(Boolean, default=False)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    tags: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)

    # "metadata" is reserved on declarative classes
    doc_metadata: Mapped[dict | None] = mapped_column("metadata", JSONB, nullable=True)  # {"ocr_text": "..."}

    # Full-text search vector, populated by the document service
    search_vector: Mapped[str | None] = mapped_column(TSVECTOR, nullable=True)

    __table_args__ = (
        Index("idx_documents_search_vector", "search_vector", postgresql_using="gin"),
        Index("idx_documents_folder_id", "folder_id"),
        Index("idx_documents_document_type", "document_type"),
        Index("idx_documents_uploaded_at", "uploaded_at"),
    )
