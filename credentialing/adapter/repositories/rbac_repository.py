from datetime import datetime
from typing import Optional, Set
from uuid import UUID

from sqlmodel import or_, select
from sqlmodel.ext.asyncio.session import AsyncSession

from credentialing.app.repositories.rbac_repository import IRbacRepository
from credentialing.domain.entities import Permission, Role, RoleAssignment, RolePermission


class RbacRepository(IRbacRepository):
    """Role/permission repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_role_by_name(self, name: str) -> Optional[Role]:
        """Get role by name"""
        stmt = select(Role).where(Role.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_permission_by_name(self, name: str) -> Optional[Permission]:
        """Get permission by name"""
        stmt = select(Permission).where(Permission.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create_role(self, role: Role) -> Role:
        """Create a new role"""
        self.session.add(role)
        await self.session.flush()
        await self.session.refresh(role)
        return role

    async def create_permission(self, permission: Permission) -> Permission:
        """Create a new permission"""
        self.session.add(permission)
        await self.session.flush()
        await self.session.refresh(permission)
        return permission

    async def grant_permission(self, role_id: UUID, permission_id: UUID) -> bool:
        """Link a permission to a role"""
        existing = await self.session.get(RolePermission, (role_id, permission_id))
        if existing is not None:
            return False
        self.session.add(RolePermission(role_id=role_id, permission_id=permission_id))
        await self.session.flush()
        return True

    async def get_assignment(self, identity_id: UUID, role_id: UUID) -> Optional[RoleAssignment]:
        """Get an identity's assignment of a role"""
        stmt = select(RoleAssignment).where(
            RoleAssignment.identity_id == identity_id, RoleAssignment.role_id == role_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save_assignment(self, assignment: RoleAssignment) -> RoleAssignment:
        """Create or update a role assignment"""
        self.session.add(assignment)
        await self.session.flush()
        await self.session.refresh(assignment)
        return assignment

    async def get_permission_names(self, identity_id: UUID, now: datetime) -> Set[str]:
        """Union of permission names over the identity's non-expired assignments"""
        stmt = (
            select(Permission.name)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(RoleAssignment, RoleAssignment.role_id == RolePermission.role_id)
            .where(
                RoleAssignment.identity_id == identity_id,
                or_(RoleAssignment.expires_at.is_(None), RoleAssignment.expires_at > now),
            )
            .distinct()
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def get_role_names(self, identity_id: UUID, now: datetime) -> Set[str]:
        """Names of the identity's non-expired roles"""
        stmt = (
            select(Role.name)
            .join(RoleAssignment, RoleAssignment.role_id == Role.id)
            .where(
                RoleAssignment.identity_id == identity_id,
                or_(RoleAssignment.expires_at.is_(None), RoleAssignment.expires_at > now),
            )
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())
