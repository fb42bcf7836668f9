"""
VerificationRecord Entity

Credential verification outcome of an activated professional.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from ..base import utcnow


class VerificationRecord(SQLModel, table=True):
    """
    VerificationRecord entity - 1:1 with Identity.

    Business Rules:
    - identity_id is unique
    - background_check_result holds per-check sub-statuses
      (criminal, references, education, license) plus approver and timestamp
    """

    __tablename__ = "verification_records"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    identity_id: UUID = Field(foreign_key="identities.id", unique=True, nullable=False)

    # License
    license_number: str = Field(max_length=100)
    license_state: str = Field(max_length=50)
    license_type: Optional[str] = Field(default=None, max_length=100)
    license_expiry: Optional[date] = None
    license_document_url: Optional[str] = None
    npi_number: Optional[str] = Field(default=None, max_length=20)
    licensing_authority: Optional[str] = Field(default=None, max_length=255)
    license_verified: bool = Field(default=False)

    # Malpractice
    malpractice_insurance_provider: Optional[str] = Field(default=None, max_length=255)
    malpractice_policy_number: Optional[str] = Field(default=None, max_length=100)
    malpractice_expiry: Optional[date] = None
    malpractice_document_url: Optional[str] = None

    # Education
    degree: Optional[str] = Field(default=None, max_length=100)
    degree_certificate_url: Optional[str] = None
    photo_id_url: Optional[str] = None
    specializations: Optional[list] = Field(default=None, sa_column=Column(JSON))

    # Review outcome
    background_check_status: str = Field(default="not_started", max_length=50)
    background_check_result: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    verification_status: str = Field(default="pending", max_length=50)
    reviewed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    approved_by: Optional[str] = Field(default=None, max_length=255)
    verification_notes: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_verification_license", "license_number", "license_state"),
    )
