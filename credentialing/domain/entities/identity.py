"""
Identity Entity

Production account of a verified professional.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import IdentityStatus


class Identity(SQLModel, table=True):
    """
    Identity entity - authenticated account backed by an external identity provider.

    Business Rules:
    - (external_subject_id, external_subject_type) is unique
    - Email is unique across all identities
    - Created only by account activation or an organization invite redemption
    - Owned by profile management once created
    """

    __tablename__ = "identities"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    external_subject_id: str = Field(max_length=255, nullable=False)
    external_subject_type: str = Field(default="cognito", max_length=50)

    email: str = Field(unique=True, index=True, max_length=255)
    phone_number: Optional[str] = Field(default=None, max_length=20, index=True)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)

    status: IdentityStatus = Field(default=IdentityStatus.pending_verification)
    verified: bool = Field(default=False)
    verified_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    primary_role: str = Field(default="therapist", max_length=50)
    organization_id: Optional[UUID] = Field(default=None, foreign_key="organizations.id")
    profile_image_url: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint(
            "external_subject_id", "external_subject_type", name="uq_identity_subject"
        ),
        Index("idx_identity_status", "status"),
    )
