"""
Audit Trail

Writes the operational workflow log and the regulatory compliance log.
Entries are added to the caller's UnitOfWork and commit or roll back with it.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.domain.context import SYSTEM_CONTEXT, Principal, RequestContext
from credentialing.domain.entities import (
    ActorType,
    ComplianceAuditEntry,
    ComplianceLevel,
    WorkflowLogEntry,
    WorkflowOutcome,
)


class AuditTrail:
    """Append-only writer for WorkflowLogEntry and ComplianceAuditEntry"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def record_workflow(
        self,
        *,
        stage: str,
        action: str,
        application_id: Optional[UUID] = None,
        identity_id: Optional[UUID] = None,
        outcome: WorkflowOutcome = WorkflowOutcome.success,
        actor_type: ActorType = ActorType.system,
        actor: Optional[Principal] = None,
        details: Optional[Dict[str, Any]] = None,
        error_message: Optional[str] = None,
    ) -> WorkflowLogEntry:
        entry = WorkflowLogEntry(
            application_id=application_id,
            identity_id=identity_id,
            stage=stage,
            action=action,
            outcome=outcome,
            actor_type=actor_type,
            actor_id=actor.subject_id if actor else None,
            details=details or {},
            error_message=error_message,
        )
        return await self.uow.workflow_log.create(entry)

    async def record_compliance(
        self,
        *,
        action: str,
        resource_type: str,
        resource_id: Optional[str],
        old_values: Optional[Dict[str, Any]] = None,
        new_values: Optional[Dict[str, Any]] = None,
        actor_type: ActorType = ActorType.system,
        actor: Optional[Principal] = None,
        context: Optional[RequestContext] = None,
        compliance_level: ComplianceLevel = ComplianceLevel.pii,
    ) -> ComplianceAuditEntry:
        context = context or SYSTEM_CONTEXT
        entry = ComplianceAuditEntry(
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            old_values=old_values,
            new_values=new_values,
            actor_type=actor_type,
            actor_id=actor.subject_id if actor else None,
            ip_address=context.ip_address,
            user_agent=context.user_agent,
            request_id=context.request_id,
            compliance_level=compliance_level,
        )
        return await self.uow.compliance_audit.create(entry)
