"""
ComplianceAuditEntry Entity

Regulatory audit trail for changes to PII-bearing records.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from ..base import append_only, utcnow
from .enums import ActorType, ComplianceLevel


@append_only
class ComplianceAuditEntry(SQLModel, table=True):
    """
    ComplianceAuditEntry entity - immutable before/after snapshot.

    Business Rules:
    - Append-only (ORM updates and deletes raise ImmutableRecordError)
    - Written in the same transaction as the change it records
    - Carries the request origin (ip, user agent, request id)
    """

    __tablename__ = "compliance_audit_entries"

    id: Optional[int] = Field(default=None, primary_key=True)

    action: str = Field(max_length=100)
    resource_type: str = Field(max_length=100)
    resource_id: Optional[str] = Field(default=None, max_length=255)

    old_values: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    new_values: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    actor_type: ActorType = Field(default=ActorType.system)
    actor_id: Optional[str] = Field(default=None, max_length=255)

    ip_address: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = None
    request_id: Optional[str] = Field(default=None, max_length=64)

    compliance_level: ComplianceLevel = Field(default=ComplianceLevel.standard)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_compliance_resource", "resource_type", "resource_id"),
        Index("idx_compliance_created_at", "created_at"),
    )
