"""
Create Organization Invite Use Case

Issues invite codes that let pre-vetted professionals skip review.
"""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from credentialing.app.services.audit_trail import AuditTrail
from credentialing.app.services.permission_gate import PermissionGate
from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.domain.base import utcnow
from credentialing.domain.context import Principal, RequestContext
from credentialing.domain.entities import (
    ActorType,
    ComplianceLevel,
    OrganizationInvite,
    OrganizationStatus,
)
from credentialing.libs.result import Error, Result, Return

from .dtos import InviteResponse


def generate_invite_code(prefix: str) -> str:
    """ORG-XXXXXXXXXXXX style code: prefix plus 12 upper-case hex characters"""
    return f"{prefix}-{secrets.token_hex(6).upper()}"


def to_invite_response(invite: OrganizationInvite) -> InviteResponse:
    return InviteResponse(
        id=str(invite.id),
        organization_id=str(invite.organization_id),
        code=invite.code,
        email=invite.email,
        role=invite.role,
        max_uses=invite.max_uses,
        current_uses=invite.current_uses,
        status=invite.status.value,
        expires_at=invite.expires_at,
        created_by=invite.created_by,
        created_at=invite.created_at,
    )


class CreateInviteUseCase:
    """
    Use case for creating organization invites.

    Business Rules:
    - Caller needs organizations.update
    - Organization must exist and be active
    - Role must exist in the RBAC catalog
    - max_uses is at least 1
    - Without an explicit expiry the invite expires after the configured default
    """

    def __init__(self, uow: UnitOfWork, config):
        self.uow = uow
        self.config = config

    async def execute(
        self,
        principal: Principal,
        organization_id: UUID,
        email: Optional[str] = None,
        max_uses: int = 1,
        expires_at: Optional[datetime] = None,
        role: str = "therapist",
        context: Optional[RequestContext] = None,
    ) -> Result[InviteResponse]:
        if max_uses < 1:
            return Return.err(Error("VALIDATION_ERROR", "maxUses must be at least 1"))

        async with self.uow:
            authorized = await PermissionGate(self.uow).authorize(
                principal, "organizations.update"
            )
            if authorized.is_err():
                return authorized

            organization = await self.uow.organizations.get_by_id(organization_id)
            if organization is None or organization.status != OrganizationStatus.active:
                return Return.err(Error("ORGANIZATION_NOT_FOUND", "Organization not found"))

            if await self.uow.rbac.get_role_by_name(role) is None:
                return Return.err(Error("ROLE_NOT_FOUND", f"Role not found: {role}"))

            if expires_at is None and self.config.INVITE_DEFAULT_EXPIRY_DAYS:
                expires_at = utcnow() + timedelta(days=self.config.INVITE_DEFAULT_EXPIRY_DAYS)
            elif expires_at is not None and expires_at.tzinfo is not None:
                # Stored as naive UTC
                expires_at = expires_at.astimezone(UTC).replace(tzinfo=None)

            invite = OrganizationInvite(
                organization_id=organization_id,
                code=generate_invite_code(self.config.INVITE_CODE_PREFIX),
                email=email.lower() if email else None,
                role=role,
                max_uses=max_uses,
                expires_at=expires_at,
                created_by=principal.subject_id,
            )
            invite = await self.uow.invites.create(invite)

            await AuditTrail(self.uow).record_compliance(
                action="organization_invite_created",
                resource_type="organization_invite",
                resource_id=str(invite.id),
                new_values={
                    "organization_id": str(organization_id),
                    "email": invite.email,
                    "role": role,
                    "max_uses": max_uses,
                },
                actor_type=ActorType.admin,
                actor=principal,
                context=context,
                compliance_level=ComplianceLevel.standard,
            )

            await self.uow.commit()

            return Return.ok(to_invite_response(invite))
