"""
Get My Permissions Use Case
"""

from credentialing.app.services.permission_gate import PermissionGate
from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.domain.base import utcnow
from credentialing.domain.context import Principal
from credentialing.domain.entities import IdentityStatus
from credentialing.libs.result import Result, Return

from .dtos import MyPermissionsResponse


class GetMyPermissionsUseCase:
    """Effective roles and permissions of the calling principal"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, principal: Principal) -> Result[MyPermissionsResponse]:
        async with self.uow:
            gate = PermissionGate(self.uow)
            identity = await gate.resolve_identity(principal)
            permissions = await gate.permissions_for(principal)

            roles = set()
            if identity is not None and identity.status == IdentityStatus.active:
                roles = await self.uow.rbac.get_role_names(identity.id, utcnow())

            return Return.ok(
                MyPermissionsResponse(
                    external_subject_id=principal.subject_id,
                    identity_id=str(identity.id) if identity else None,
                    roles=sorted(roles),
                    permissions=sorted(permissions),
                )
            )
