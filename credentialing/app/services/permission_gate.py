"""
Permission Gate

Resolves a principal's effective permissions from its role assignments.
"""

import logging
from typing import Iterable, Optional, Set

from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.domain.base import utcnow
from credentialing.domain.context import Principal
from credentialing.domain.entities import Identity, IdentityStatus
from credentialing.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


class PermissionGate:
    """
    Role-based permission checks for one request.

    Business Rules:
    - Effective permissions are the union over all non-expired role assignments
    - A principal with no Identity, or a non-active one, holds no permissions
    - Results are cached for the lifetime of the gate instance
    - Must be used inside an open UnitOfWork
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self._permissions: dict = {}
        self._identities: dict = {}

    async def resolve_identity(self, principal: Principal) -> Optional[Identity]:
        key = (principal.subject_id, principal.subject_type)
        if key not in self._identities:
            self._identities[key] = await self.uow.identities.get_by_subject(
                principal.subject_id, principal.subject_type
            )
        return self._identities[key]

    async def permissions_for(self, principal: Principal) -> Set[str]:
        key = (principal.subject_id, principal.subject_type)
        if key in self._permissions:
            return self._permissions[key]

        identity = await self.resolve_identity(principal)
        if identity is None or identity.status != IdentityStatus.active:
            permissions: Set[str] = set()
        else:
            permissions = await self.uow.rbac.get_permission_names(identity.id, utcnow())

        self._permissions[key] = permissions
        return permissions

    async def has_permission(self, principal: Principal, name: str) -> bool:
        return name in await self.permissions_for(principal)

    async def has_any(self, principal: Principal, names: Iterable[str]) -> bool:
        permissions = await self.permissions_for(principal)
        return any(name in permissions for name in names)

    async def has_all(self, principal: Principal, names: Iterable[str]) -> bool:
        permissions = await self.permissions_for(principal)
        return all(name in permissions for name in names)

    async def authorize(self, principal: Principal, name: str) -> Result[None]:
        """Return PERMISSION_DENIED unless the principal holds the named permission."""
        if await self.has_permission(principal, name):
            return Return.ok()

        logger.warning(f"Permission denied: subject={principal.subject_id} permission={name}")
        return Return.err(
            Error(
                "PERMISSION_DENIED",
                f"Missing required permission: {name}",
                {"required_permission": name},
            )
        )
