from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Set
from uuid import UUID

from credentialing.domain.entities import Permission, Role, RoleAssignment


class IRbacRepository(ABC):
    """Role/permission repository interface - application layer"""

    @abstractmethod
    async def get_role_by_name(self, name: str) -> Optional[Role]:
        """Get role by name"""
        pass

    @abstractmethod
    async def get_permission_by_name(self, name: str) -> Optional[Permission]:
        """Get permission by name"""
        pass

    @abstractmethod
    async def create_role(self, role: Role) -> Role:
        """Create a new role"""
        pass

    @abstractmethod
    async def create_permission(self, permission: Permission) -> Permission:
        """Create a new permission"""
        pass

    @abstractmethod
    async def grant_permission(self, role_id: UUID, permission_id: UUID) -> bool:
        """
        Link a permission to a role.

        Returns:
            True if the link was created, False if it already existed
        """
        pass

    @abstractmethod
    async def get_assignment(self, identity_id: UUID, role_id: UUID) -> Optional[RoleAssignment]:
        """Get an identity's assignment of a role"""
        pass

    @abstractmethod
    async def save_assignment(self, assignment: RoleAssignment) -> RoleAssignment:
        """Create or update a role assignment"""
        pass

    @abstractmethod
    async def get_permission_names(self, identity_id: UUID, now: datetime) -> Set[str]:
        """Union of permission names over the identity's non-expired assignments"""
        pass

    @abstractmethod
    async def get_role_names(self, identity_id: UUID, now: datetime) -> Set[str]:
        """Names of the identity's non-expired roles"""
        pass
