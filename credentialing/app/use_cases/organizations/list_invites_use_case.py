"""
List Organization Invites Use Case
"""

from typing import Optional
from uuid import UUID

from credentialing.app.services.permission_gate import PermissionGate
from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.domain.context import Principal
from credentialing.domain.entities import InviteStatus
from credentialing.libs.result import Error, Result, Return

from .create_invite_use_case import to_invite_response
from .dtos import InviteListResponse


class ListInvitesUseCase:
    """
    Use case for listing organization invites.

    Business Rules:
    - Caller needs organizations.read
    - Optional filters by organization and status
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        principal: Principal,
        organization_id: Optional[UUID] = None,
        status: Optional[str] = None,
    ) -> Result[InviteListResponse]:
        invite_status = None
        if status:
            try:
                invite_status = InviteStatus(status)
            except ValueError:
                return Return.err(Error("VALIDATION_ERROR", f"Invalid invite status: {status}"))

        async with self.uow:
            authorized = await PermissionGate(self.uow).authorize(principal, "organizations.read")
            if authorized.is_err():
                return authorized

            invites = await self.uow.invites.list_invites(organization_id, invite_status)
            return Return.ok(
                InviteListResponse(invites=[to_invite_response(invite) for invite in invites])
            )
