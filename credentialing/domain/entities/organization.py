"""
Organization and OrganizationInvite Entities

Pre-vetted affiliations whose invite codes bypass the review pipeline.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import InviteStatus, OrganizationStatus


class Organization(SQLModel, table=True):
    """Organization entity - a practice group professionals can join"""

    __tablename__ = "organizations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    status: OrganizationStatus = Field(default=OrganizationStatus.active)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))


class OrganizationInvite(SQLModel, table=True):
    """
    OrganizationInvite entity - reusable invite code bound to an organization.

    Business Rules:
    - current_uses only ever increments and never exceeds max_uses
    - status flips to used when the last use is consumed
    - Optional email binds the invite to a single applicant
    """

    __tablename__ = "organization_invites"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    organization_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    code: str = Field(unique=True, index=True, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    role: str = Field(default="therapist", max_length=50)

    max_uses: int = Field(default=1)
    current_uses: int = Field(default=0)
    status: InviteStatus = Field(default=InviteStatus.active)

    used_by: Optional[UUID] = Field(default=None)
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    expires_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_by: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        CheckConstraint("current_uses <= max_uses", name="ck_invite_uses_within_max"),
        CheckConstraint("max_uses >= 1", name="ck_invite_max_uses_positive"),
        Index("idx_org_invite_status", "status"),
    )
