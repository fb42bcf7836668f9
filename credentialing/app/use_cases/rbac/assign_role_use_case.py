"""
Assign Role Use Case

Grants (or re-grants with a new expiry) a role to an identity.
"""

import logging
from datetime import UTC, datetime
from typing import Optional
from uuid import UUID

from credentialing.app.services.audit_trail import AuditTrail
from credentialing.app.services.permission_gate import PermissionGate
from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.domain.context import Principal, RequestContext
from credentialing.domain.entities import ActorType, ComplianceLevel, RoleAssignment
from credentialing.libs.result import Error, Result, Return

from .dtos import RoleAssignmentResponse

logger = logging.getLogger(__name__)


class AssignRoleUseCase:
    """
    Use case for assigning a role to an identity.

    Business Rules:
    - Caller needs users.manage_roles
    - Identity and role must exist
    - (identity, role) is unique; assigning again updates the expiry
    - Writes a critical compliance entry
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        principal: Principal,
        identity_id: UUID,
        role_name: str,
        expires_at: Optional[datetime] = None,
        context: Optional[RequestContext] = None,
    ) -> Result[RoleAssignmentResponse]:
        if expires_at is not None and expires_at.tzinfo is not None:
            expires_at = expires_at.astimezone(UTC).replace(tzinfo=None)

        async with self.uow:
            authorized = await PermissionGate(self.uow).authorize(principal, "users.manage_roles")
            if authorized.is_err():
                return authorized

            identity = await self.uow.identities.get_by_id(identity_id)
            if identity is None:
                return Return.err(Error("IDENTITY_NOT_FOUND", "Identity not found"))

            role = await self.uow.rbac.get_role_by_name(role_name)
            if role is None:
                return Return.err(Error("ROLE_NOT_FOUND", f"Role not found: {role_name}"))

            assignment = await self.uow.rbac.get_assignment(identity_id, role.id)
            old_values = None
            if assignment is None:
                assignment = RoleAssignment(identity_id=identity_id, role_id=role.id)
            else:
                old_values = {
                    "expires_at": assignment.expires_at.isoformat()
                    if assignment.expires_at
                    else None
                }
            assignment.expires_at = expires_at
            assignment.assigned_by = principal.subject_id
            assignment = await self.uow.rbac.save_assignment(assignment)

            await AuditTrail(self.uow).record_compliance(
                action="role_assigned",
                resource_type="identity",
                resource_id=str(identity_id),
                old_values=old_values,
                new_values={
                    "role": role_name,
                    "expires_at": expires_at.isoformat() if expires_at else None,
                },
                actor_type=ActorType.admin,
                actor=principal,
                context=context,
                compliance_level=ComplianceLevel.critical,
            )

            await self.uow.commit()

            logger.info(f"Role {role_name} assigned to {identity_id} by {principal.subject_id}")
            return Return.ok(
                RoleAssignmentResponse(
                    assignment_id=str(assignment.id),
                    identity_id=str(identity_id),
                    role=role_name,
                    expires_at=assignment.expires_at,
                    assigned_by=assignment.assigned_by,
                )
            )
