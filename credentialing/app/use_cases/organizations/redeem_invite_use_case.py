"""
Redeem Organization Invite Use Case

Fast path that activates a pre-vetted professional without the review
pipeline.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from credentialing.app.services.audit_trail import AuditTrail
from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.domain.base import utcnow
from credentialing.domain.context import Principal, RequestContext
from credentialing.domain.entities import (
    ActorType,
    ComplianceLevel,
    Identity,
    IdentityStatus,
    InviteStatus,
    OrganizationInvite,
    RoleAssignment,
)
from credentialing.libs.result import Error, Result, Return

from .dtos import InviteApplicant, RedeemInviteResponse

logger = logging.getLogger(__name__)

INVITE_NO_LONGER_VALID = Error("INVITE_NO_LONGER_VALID", "invite no longer valid")


def is_redeemable(invite: OrganizationInvite, email: str, now: datetime) -> bool:
    if invite.status != InviteStatus.active:
        return False
    if invite.expires_at is not None and invite.expires_at <= now:
        return False
    if invite.current_uses >= invite.max_uses:
        return False
    if invite.email and invite.email.lower() != email.lower():
        return False
    return True


class RedeemInviteUseCase:
    """
    Use case for redeeming an organization invite code.

    Business Rules:
    - Invite must be active, unexpired, below max_uses and match a bound email
    - One use is consumed with a conditional increment before any identity is written
    - Under concurrent redemption of the last use exactly one caller wins
    - The identity is created (or activated) pre-verified, bound to the organization
    - The invite's role is granted
    - An email held by a different identity aborts the whole redemption
    """

    def __init__(self, uow: UnitOfWork, config):
        self.uow = uow
        self.config = config

    async def execute(
        self,
        code: str,
        applicant: InviteApplicant,
        context: Optional[RequestContext] = None,
    ) -> Result[RedeemInviteResponse]:
        """
        Execute redeem invite use case.

        Args:
            code: Invite code
            applicant: Identity data of the applicant
            context: Request origin for the compliance log

        Returns:
            Result with RedeemInviteResponse, or Error
        """
        async with self.uow:
            try:
                result = await self._redeem(code, applicant, context)
                if result.is_err():
                    await self.uow.rollback()
                    return result
                await self.uow.commit()
            except IntegrityError as exc:
                await self.uow.rollback()
                logger.warning(f"Invite redemption conflicted: {exc.orig}")
                return Return.err(
                    Error("IDENTITY_CONFLICT", "Account already exists for this applicant")
                )
            except SQLAlchemyError as exc:
                await self.uow.rollback()
                logger.error(f"Invite redemption failed: {exc}")
                return Return.err(
                    Error(
                        "TRANSIENT_STORAGE_ERROR",
                        "Storage temporarily unavailable, please retry",
                    )
                )

        logger.info(
            f"Invite redeemed by {applicant.external_subject_id} "
            f"into organization {result.value.organization_id}"
        )
        return result

    async def _redeem(
        self, code: str, applicant: InviteApplicant, context: Optional[RequestContext]
    ) -> Result[RedeemInviteResponse]:
        now = utcnow()
        email = applicant.email.lower()
        subject_type = self.config.EXTERNAL_SUBJECT_TYPE
        actor = Principal(applicant.external_subject_id, subject_type, email)

        invite = await self.uow.invites.get_by_code(code.strip())
        if invite is None or not is_redeemable(invite, email, now):
            return Return.err(INVITE_NO_LONGER_VALID)

        identity = await self.uow.identities.get_by_subject(
            applicant.external_subject_id, subject_type
        )
        holder = await self.uow.identities.get_by_email(email)
        if holder is not None and (identity is None or holder.id != identity.id):
            return Return.err(
                Error("IDENTITY_CONFLICT", "Email is already registered to another account")
            )

        role = await self.uow.rbac.get_role_by_name(invite.role)
        if role is None:
            return Return.err(Error("ROLE_NOT_FOUND", f"Role not found: {invite.role}"))

        # Claim the use before writing anything else
        identity_id = identity.id if identity else uuid4()
        consumed = await self.uow.invites.consume_use(invite.id, identity_id, now)
        if not consumed:
            return Return.err(INVITE_NO_LONGER_VALID)

        previous_status = identity.status.value if identity else None
        if identity is None:
            identity = Identity(
                id=identity_id,
                external_subject_id=applicant.external_subject_id,
                external_subject_type=subject_type,
                email=email,
                phone_number=applicant.phone_number,
                first_name=applicant.first_name,
                last_name=applicant.last_name,
                profile_image_url=applicant.profile_image_url,
                status=IdentityStatus.active,
                verified=True,
                verified_at=now,
                primary_role=invite.role,
                organization_id=invite.organization_id,
            )
            identity = await self.uow.identities.create(identity)
        else:
            identity.email = email
            identity.status = IdentityStatus.active
            identity.verified = True
            identity.verified_at = identity.verified_at or now
            identity.organization_id = invite.organization_id
            identity.updated_at = now
            identity = await self.uow.identities.update(identity)

        if await self.uow.rbac.get_assignment(identity.id, role.id) is None:
            await self.uow.rbac.save_assignment(
                RoleAssignment(
                    identity_id=identity.id,
                    role_id=role.id,
                    assigned_by=f"invite:{invite.code}",
                )
            )

        audit = AuditTrail(self.uow)
        await audit.record_workflow(
            stage="organization_invite",
            action="organization_invite_redeemed",
            identity_id=identity.id,
            actor_type=ActorType.applicant,
            actor=actor,
            details={
                "invite_id": str(invite.id),
                "organization_id": str(invite.organization_id),
                "role": invite.role,
            },
        )
        await audit.record_compliance(
            action="organization_invite_redeemed",
            resource_type="identity",
            resource_id=str(identity.id),
            old_values={"identity_status": previous_status},
            new_values={
                "identity_status": IdentityStatus.active.value,
                "organization_id": str(invite.organization_id),
                "role": invite.role,
            },
            actor_type=ActorType.applicant,
            actor=actor,
            context=context,
            compliance_level=ComplianceLevel.critical,
        )

        return Return.ok(
            RedeemInviteResponse(
                identity_id=str(identity.id),
                organization_id=str(invite.organization_id),
                role=invite.role,
                status=identity.status.value,
                email=identity.email,
            )
        )
