from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlmodel import case, or_, select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from credentialing.app.repositories.organization_repository import (
    IOrganizationInviteRepository,
    IOrganizationRepository,
)
from credentialing.domain.entities import InviteStatus, Organization, OrganizationInvite


class OrganizationRepository(IOrganizationRepository):
    """Organization repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, organization_id: UUID) -> Optional[Organization]:
        """Get organization by ID"""
        stmt = select(Organization).where(Organization.id == organization_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, organization: Organization) -> Organization:
        """Create a new organization"""
        self.session.add(organization)
        await self.session.flush()
        await self.session.refresh(organization)
        return organization


class OrganizationInviteRepository(IOrganizationInviteRepository):
    """OrganizationInvite repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_code(self, code: str) -> Optional[OrganizationInvite]:
        """Get invite by code"""
        stmt = select(OrganizationInvite).where(OrganizationInvite.code == code)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_invites(
        self,
        organization_id: Optional[UUID] = None,
        status: Optional[InviteStatus] = None,
    ) -> List[OrganizationInvite]:
        """List invites, newest first"""
        stmt = select(OrganizationInvite)
        if organization_id is not None:
            stmt = stmt.where(OrganizationInvite.organization_id == organization_id)
        if status is not None:
            stmt = stmt.where(OrganizationInvite.status == status)
        stmt = stmt.order_by(OrganizationInvite.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, invite: OrganizationInvite) -> OrganizationInvite:
        """Create a new invite"""
        self.session.add(invite)
        await self.session.flush()
        await self.session.refresh(invite)
        return invite

    async def consume_use(self, invite_id: UUID, used_by: UUID, now: datetime) -> bool:
        """Atomically consume one use of an invite"""
        # SET expressions see the pre-update row, so current_uses + 1 is the new count
        stmt = (
            update(OrganizationInvite)
            .where(
                OrganizationInvite.id == invite_id,
                OrganizationInvite.status == InviteStatus.active,
                OrganizationInvite.current_uses < OrganizationInvite.max_uses,
                or_(
                    OrganizationInvite.expires_at.is_(None),
                    OrganizationInvite.expires_at > now,
                ),
            )
            .values(
                current_uses=OrganizationInvite.current_uses + 1,
                used_by=used_by,
                used_at=now,
                status=case(
                    (
                        OrganizationInvite.current_uses + 1 >= OrganizationInvite.max_uses,
                        InviteStatus.used.value,
                    ),
                    else_=OrganizationInvite.status,
                ),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1
