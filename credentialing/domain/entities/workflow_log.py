"""
WorkflowLogEntry Entity

Operational history of every workflow step.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from ..base import append_only, utcnow
from .enums import ActorType, WorkflowOutcome


@append_only
class WorkflowLogEntry(SQLModel, table=True):
    """
    WorkflowLogEntry entity - immutable record of a workflow step.

    Business Rules:
    - Append-only (ORM updates and deletes raise ImmutableRecordError)
    - Integer key gives a total insertion order within equal timestamps
    """

    __tablename__ = "workflow_log_entries"

    id: Optional[int] = Field(default=None, primary_key=True)

    application_id: Optional[UUID] = Field(default=None, index=True)
    identity_id: Optional[UUID] = Field(default=None, index=True)

    stage: str = Field(max_length=50)
    action: str = Field(max_length=100)  # e.g., "registration_created", "account_activated"
    outcome: WorkflowOutcome = Field(default=WorkflowOutcome.success)

    actor_type: ActorType = Field(default=ActorType.system)
    actor_id: Optional[str] = Field(default=None, max_length=255)

    details: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    error_message: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_workflow_log_application_created", "application_id", "created_at"),
        Index("idx_workflow_log_action", "action"),
    )
