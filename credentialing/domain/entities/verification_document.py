"""
VerificationDocument Entity

Uploaded supporting document for a provisional application.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import DocumentStatus, DocumentType


class VerificationDocument(SQLModel, table=True):
    """
    VerificationDocument entity - one row per upload.

    Business Rules:
    - file_url is an opaque storage reference
    - Uploading the same type again adds a row; the application keeps the latest URL
    """

    __tablename__ = "verification_documents"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    application_id: UUID = Field(
        foreign_key="provisional_applications.id", nullable=False, index=True
    )

    document_type: DocumentType = Field(nullable=False)
    file_url: str
    file_name: Optional[str] = Field(default=None, max_length=255)
    file_size: Optional[int] = None
    mime_type: Optional[str] = Field(default=None, max_length=100)
    expiry_date: Optional[date] = None

    status: DocumentStatus = Field(default=DocumentStatus.pending)
    uploaded_by: str = Field(max_length=255)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_document_application_type", "application_id", "document_type"),
    )
